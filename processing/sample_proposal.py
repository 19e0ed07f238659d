"""
Sample raw proposal used by the demo command and the test suite.

It reproduces the defects typical of chat-transcript exports: stray bullet
markers, separator rules, stock placeholder sentences, "X weeks" durations,
"$X,XXX" amounts and fixed-width pricing tables.
"""

SAMPLE_PROPOSAL = """
Harbourside Council Digital Services Proposal
Prepared for: Harbourside City Council
Version: 1.2

Executive Summary
Brief overview of the proposed project... X weeks / $X,XXX

This proposal covers the redevelopment of the Harbourside City Council resident portal and the integration of its service request workflow with the existing asset management platform.

---

Project Outcomes
- Residents can lodge and track service requests online
- Council staff triage requests from a single queue
- Reporting on response times is available to management
-

Component 1: Resident Portal Redevelopment

Project Overview
Brief overview of the proposed project...

Objectives
- Rebuild the portal on a maintainable content platform
- Meet accessibility requirements for all public pages
- Reduce average page load time below two seconds
- Provide a consistent visual identity across council services

Key Deliverables
- Accessible page templates and component library
- Migrated content for all current service pages
- Editor training sessions and handbook

Pricing Summary
ROLE              DESCRIPTION                      HOURS     RATE      TOTAL
Lead Developer    Platform build and templates     120       $150      $18,000
Interface Designer    Research and interface design    60        $130      $7,800
Content Editor    Content migration                40        $90       $3,600

Budget Notes
- Rates are quoted excluding GST
- Hosting costs are billed separately

Component 2: Service Request Integration

Project Overview
Brief overview of the proposed project...

Objectives
- Connect the portal request forms to the asset management system
- Notify residents by email when request status changes
- Give staff a single dashboard for incoming requests

Pricing Summary
ROLE                 DESCRIPTION                     HOURS     RATE      TOTAL
Integration Lead     Interface design and mapping    80        $160      $12,800
Backend Developer    Request workflow services       96        $140      $13,440
QA Engineer          Integration and load testing    40        $110      $4,400

Assumptions
- Council will provide sandbox access to the asset management system
- Delivery is expected to take X weeks from kickoff
- Any additional integrations will be quoted at $X,XXX per system

==========

Account & Project Management
- Fortnightly status meetings with the council project sponsor
- Risk and issue register maintained for the life of the engagement
- Final handover report and support transition plan
"""
