"""CLI entry point for the Nexus AI Receptionist.

A terminal chat loop for testing grounding and booking without the API.
Each line is answered independently; there is no conversation memory.

Usage:
    python -m receptionist.main                    # default tenant
    python -m receptionist.main --tenant t1        # another tenant's knowledge
    python -m receptionist.main --debug            # show store/model logs
"""

from __future__ import annotations

import argparse
import logging

from dotenv import load_dotenv

from receptionist.agent import create_receptionist
from receptionist.models import DEFAULT_TENANT

logger = logging.getLogger(__name__)


def _configure_logging(debug: bool = False) -> None:
    """Set up logging: WARNING by default, DEBUG when --debug is passed."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    )

    if not debug:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.getLogger("receptionist").setLevel(logging.DEBUG if debug else logging.INFO)


def main():
    """Run the interactive CLI chat loop."""
    parser = argparse.ArgumentParser(description="Nexus AI Receptionist CLI")
    parser.add_argument(
        "--tenant", default=DEFAULT_TENANT,
        help="Tenant whose profile and knowledge ground the answers",
    )
    parser.add_argument(
        "--debug", action="store_true",
        help="Show all log messages including HTTP requests",
    )
    args = parser.parse_args()

    load_dotenv()
    _configure_logging(debug=args.debug)

    print("\n" + "=" * 60)
    print("  Nexus AI Receptionist - CLI Chat")
    print("=" * 60)
    print(f"  Tenant: {args.tenant}")
    print("  Type your message and press Enter. 'quit' to exit.")
    print("=" * 60 + "\n")

    receptionist = create_receptionist()
    try:
        while True:
            try:
                user_input = input("You: ").strip()
            except (KeyboardInterrupt, EOFError):
                print("\n\nGoodbye!")
                break

            if not user_input:
                continue
            if user_input.lower() in ("exit", "quit", "q"):
                print("\nGoodbye!")
                break

            try:
                reply = receptionist.orchestrator.respond(args.tenant, user_input)
            except Exception as e:
                logger.exception("Error processing message")
                print(f"\nReceptionist: Sorry, something went wrong: {e}\n")
                continue
            print(f"\nReceptionist: {reply}\n")
    finally:
        receptionist.shutdown()


if __name__ == "__main__":
    main()
