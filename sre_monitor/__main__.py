"""``python -m sre_monitor`` starts the HTTP service."""

from sre_monitor.application.app import main

if __name__ == "__main__":
    main()
