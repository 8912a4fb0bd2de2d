"""CallRelay — tool-call dispatch and specialized voice-agent orchestration.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Only the version string lives here: explicit imports elsewhere, no star exports
"""

__version__ = "1.0.0"
