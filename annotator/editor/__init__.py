"""
Annotation editing boundary.

Design intent:
- Keep the draft lifecycle and tag-set rules independent from any UI toolkit.
- Commit drafts through an injected async save service and report failures
  through a notification sink instead of raising.
- Expose explicit key-handling results rather than mutating event objects.
"""
