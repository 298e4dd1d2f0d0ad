"""Grant Portal.

Backend service for a research-grant management application: publishing calls
for proposals, collecting proposals with their budgets and teams, running peer
review, recording funding decisions and tracking the resulting awards.

Core subpackages
----------------

- ``grant_portal.core``:

  - SQLModel entities and async repositories for every table.
  - Domain enums and the status transition tables.
  - Pydantic I/O schemas used by the HTTP layer.
  - Logging and Logfire monitoring setup.

- ``grant_portal.server``:

  - The FastAPI application, its routers and middleware.
  - Supabase-backed authentication with server-side sessions.
  - Role-based access rules and the small service layer behind the routes.

Typical workflow
----------------

1. A grant manager creates a call and publishes it.
2. A researcher drafts a proposal against the call, adds team members,
   budget lines and attachments, then submits it.
3. Reviewers score the proposal while managers move it through review.
4. A manager records a decision; approved proposals receive an award whose
   milestones, disbursements and progress reports are tracked afterwards.
"""

__version__ = "0.1.0"
