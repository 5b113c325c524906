#!/usr/bin/env python3
"""
Prospect CRM - menu launcher.

Numbered menu over the `prospectcrm` CLI for people who would rather not type
commands. Each entry is a CLI command plus the questions needed to fill in its
arguments; the command itself runs in a child process so a failing command
only costs one menu round.

    python main.py
"""

import os
import subprocess
import sys
from typing import List, NamedTuple, Optional

from prospectcrm.config import load_backend_settings

ROOT = os.path.dirname(os.path.abspath(__file__))
CLI = [sys.executable, "-m", "prospectcrm.cli.main"]


class Ask(NamedTuple):
    """One question. `flag` None means a positional argument."""
    label: str
    flag: Optional[str] = None
    required: bool = False
    yes_no: bool = False


class Entry(NamedTuple):
    label: str
    command: List[str]
    questions: List[Ask] = []


MENU = [
    ("ORGANIZATIONS", [
        Entry("List organizations", ["orgs", "list"], [
            Ask("Region (Nord/Sud/Est/Ouest/Centre)", "--region"),
            Ask("Status (prospect/active/client/inactive)", "--status"),
        ]),
        Entry("Show organization", ["orgs", "show"], [Ask("Organization ID", required=True)]),
        Entry("Add organization", ["orgs", "add"]),
        Entry("Edit organization", ["orgs", "edit"], [
            Ask("Organization ID", required=True),
            Ask("New status", "--status"),
            Ask("New priority (low/medium/high)", "--priority"),
            Ask("New email", "--email"),
            Ask("New notes", "--notes"),
        ]),
        Entry("Import CSV/Excel file", ["orgs", "import"], [
            Ask("File path", required=True),
            Ask("Only preview the column mapping", "--dry-run", yes_no=True),
        ]),
    ]),
    ("CONTACTS", [
        Entry("List contacts", ["contacts", "list"], [Ask("Organization ID", "--org")]),
        Entry("Add contact", ["contacts", "add"]),
        Entry("Edit contact", ["contacts", "edit"], [
            Ask("Contact ID", required=True),
            Ask("Prospect status (cold/warm/hot/...)", "--status"),
            Ask("Next follow-up (YYYY-MM-DD)", "--follow-up"),
        ]),
    ]),
    ("APPOINTMENTS", [
        Entry("List appointments", ["appointments", "list"], [
            Ask("Organization ID", "--org"),
            Ask("Contact ID", "--contact"),
        ]),
        Entry("Schedule appointment", ["appointments", "add"]),
    ]),
    ("CONTRACTS & DOCUMENTS", [
        Entry("List contracts", ["contracts", "list"], [Ask("Salesperson", "--assignee")]),
        Entry("New contract", ["contracts", "add"]),
        Entry("Attach file to contract", ["contracts", "attach"], [
            Ask("Contract ID", required=True),
            Ask("File path", required=True),
        ]),
        Entry("Download contract file", ["contracts", "download"], [
            Ask("Contract ID", required=True),
            Ask("Document number (Enter for 1)", "--index"),
        ]),
        Entry("List sales documents", ["documents", "list"], [
            Ask("Category (presentation_commerciale/contrat)", "--category"),
        ]),
    ]),
    ("TEAM", [
        Entry("List admins and salespeople", ["users", "list"]),
        Entry("Add salesperson", ["users", "add", "--role", "salesperson"]),
        Entry("Add admin", ["users", "add", "--role", "admin"]),
    ]),
    ("OVERVIEW", [
        Entry("Dashboard", ["dashboard"]),
        Entry("Data mode", ["mode"]),
        Entry("Reload demo data", ["demo", "load"]),
    ]),
]


def ask(question: Ask) -> str:
    suffix = " (y/N)" if question.yes_no else "" if question.required else " (Enter to skip)"
    while True:
        answer = input(f"  {question.label}{suffix}: ").strip()
        if answer or not question.required:
            return answer
        print("  A value is required.")


def build_args(entry: Entry, answers: List[str]) -> List[str]:
    """Command line for an entry given one answer per question ('' = skipped)."""
    args = list(entry.command)
    for question, answer in zip(entry.questions, answers):
        if question.yes_no:
            if answer.lower() in ("y", "yes", "o", "oui"):
                args.append(question.flag)
        elif not answer:
            continue
        elif question.flag is None:
            args.append(answer)
        else:
            args += [question.flag, answer]
    return args


def run(args: List[str]) -> int:
    env = dict(os.environ, PYTHONPATH=ROOT)
    print()
    code = subprocess.run(CLI + args, env=env).returncode
    if code:
        print(f"\n  '{' '.join(args)}' exited with status {code}; details in logs/prospectcrm.log")
    input("\n  Press Enter to return to the menu...")
    return code


def clear():
    os.system("cls" if os.name == "nt" else "clear")


def mode_banner() -> str:
    settings = load_backend_settings()
    if settings.remote_enabled:
        return f"remote: {settings.service_url}"
    return "demo: local store"


def print_menu() -> dict:
    """Print the menu; returns {number: entry}."""
    clear()
    title = f"PROSPECT CRM ({mode_banner()})"
    print("=" * max(50, len(title) + 6))
    print(f"   {title}")
    print("=" * max(50, len(title) + 6))

    numbered = {}
    for section, entries in MENU:
        print(f"\n  {section}")
        for entry in entries:
            numbered[len(numbered) + 1] = entry
            print(f"  {len(numbered):>2}. {entry.label}")
    print("\n   0. Exit")
    return numbered


def main():
    while True:
        numbered = print_menu()
        try:
            choice = input("\n  Choice: ").strip().lower()
        except (KeyboardInterrupt, EOFError):
            print()
            return
        if choice in ("0", "q", "quit", "exit"):
            return
        if not choice.isdigit() or int(choice) not in numbered:
            input(f"\n  No menu entry {choice!r}. Press Enter...")
            continue

        entry = numbered[int(choice)]
        clear()
        print(f"  {entry.label}\n")
        try:
            answers = [ask(q) for q in entry.questions]
        except (KeyboardInterrupt, EOFError):
            continue
        run(build_args(entry, answers))


if __name__ == "__main__":
    main()
