"""Text report of findings: tabulate tables under colored headings."""
from __future__ import annotations

from ipaddress import IPv4Address
from typing import List, Optional

from colorama import Fore, Style
from tabulate import tabulate

from analysis.findings import Findings
from analysis.occurrence import OccurrenceEntry
from protocol.constants import Protocol

TABLE_FORMAT = "simple"

TOP_PASSWORDS_USERS = 5
TOP_USER_AGENTS = 30
TOP_EMAILS = 20
TOP_SUBMITTERS = 15


def heading(text: str) -> str:
    return f"{Fore.GREEN}{text}{Style.RESET_ALL}"


def _ranked_rows(entries: List[OccurrenceEntry]) -> List[list]:
    return [[i, entry.label, entry.count] for i, entry in enumerate(entries, start=1)]


def _total_row(width: int, label: str, total: int) -> list:
    return [""] * (width - 2) + [f"{Style.BRIGHT}{label}{Style.RESET_ALL}", total]


def render_passwords_users(findings: Findings, proto: Protocol, count: int) -> str:
    total = findings.protocol_total(proto)
    passwords, usernames = findings.top_passwords_users(proto, count)

    rows = [
        [i, password.label, password.count, "", username.label, username.count]
        for i, (password, username) in enumerate(zip(passwords, usernames), start=1)
    ]
    rows.append(_total_row(6, f"TOTAL {proto.label()} EVENTS", total))
    return tabulate(rows, headers=["#", "Passwords", "Count", "", "Users", "Count"],
                    tablefmt=TABLE_FORMAT)


def render_user_agents(findings: Findings, proto: Protocol, count: int) -> str:
    total = findings.protocol_total(proto)
    rows = _ranked_rows(findings.top_user_agents(proto, count))
    rows.append(_total_row(3, f"TOTAL {proto.label()} EVENTS", total))
    return tabulate(rows, headers=["#", "User-Agents", "Count"], tablefmt=TABLE_FORMAT)


def render_emails(findings: Findings, proto: Protocol, count: int) -> str:
    total = findings.protocol_total(proto)
    rows = _ranked_rows(findings.top_emails(proto, count))
    rows.append(_total_row(3, f"TOTAL {proto.label()} EVENTS", total))
    return tabulate(rows, headers=["#", "Email", "Count"], tablefmt=TABLE_FORMAT)


def render_submitters(findings: Findings, count: int) -> str:
    rows = _ranked_rows(findings.top_submitters(count))
    rows.append(_total_row(3, "TOTAL EVENTS", findings.total_events))
    return tabulate(rows, headers=["#", "IP Address", "Count"], tablefmt=TABLE_FORMAT)


def render_submitter(findings: Findings, address: IPv4Address) -> str:
    events = findings.submitted_by(address)
    if events:
        rows = [
            [i, str(e.event_uuid), e.protocol.label(), e.timestamp_datetime.strftime("%Y-%m-%d")]
            for i, e in enumerate(events, start=1)
        ]
    else:
        rows = [["", "NO", "EVENTS", "FOUND"]]
    return tabulate(rows, headers=["#", "Event UUID", "Protocol", "Timestamp"],
                    tablefmt=TABLE_FORMAT)


def render_report(findings: Findings, ip_detail: Optional[IPv4Address] = None) -> str:
    """
    Compose the full report.

    Raises:
        FindingsError: a required protocol or category has no observations
    """
    sections = []

    for proto in (Protocol.SSH, Protocol.TELNET):
        sections.append(heading(
            f"What are the top {TOP_PASSWORDS_USERS} {proto.label()} passwords and users?"))
        sections.append(render_passwords_users(findings, proto, TOP_PASSWORDS_USERS))

    sections.append(heading(
        f"What are the top {TOP_USER_AGENTS} {Protocol.HTTP.label()} user-agents?"))
    sections.append(render_user_agents(findings, Protocol.HTTP, TOP_USER_AGENTS))

    sections.append(heading(f"What are the top {TOP_EMAILS} {Protocol.SMTP.label()} emails?"))
    sections.append(render_emails(findings, Protocol.SMTP, TOP_EMAILS))

    sections.append(heading(f"Who are the top {TOP_SUBMITTERS} submitters?"))
    sections.append(render_submitters(findings, TOP_SUBMITTERS))

    if ip_detail is not None:
        sections.append(heading(f"What events did {ip_detail} submit?"))
        sections.append(render_submitter(findings, ip_detail))

    # heading and its table are separated by one blank line, sections by two
    return "\n\n\n".join(
        f"{sections[i]}\n\n{sections[i + 1]}" for i in range(0, len(sections), 2)
    )
