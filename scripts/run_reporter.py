"""Report newline-delimited JSON events from stdin.

Example:
    echo '{"post_type":"message","message":"hi"}' | \
        python scripts/run_reporter.py --config config/reporter.example.yml --bot-id 10001
"""

from __future__ import annotations

from cqreport.cli import main


if __name__ == "__main__":
    main()
