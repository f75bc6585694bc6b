"""Module entrypoint.

Allows:
    python -m host_health_report
"""

from __future__ import annotations

from host_health_report.cli import main

if __name__ == "__main__":
    main()
