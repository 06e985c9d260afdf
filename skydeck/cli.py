"""Terminal front-end for the console.

Usage:
    skydeck chat
    skydeck clusters
    skydeck instances gcp
    skydeck create gcp web --count 3 --cores 2 --memory 4096
    skydeck create proxmox lab --swarm 3 --vm-type lxc
    skydeck create hybrid mix --count 2 --cluster-type docker-swarm
    skydeck instance-types aws --cpu 2 --ram 4
    skydeck stop gcp web-1
    skydeck restart proxmox lab-manager
    skydeck delete-cluster aws web --yes
    skydeck credentials web-1
    skydeck consent accept
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path

from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table
from rich.text import Text

from skydeck.api.model import ActionResult, Cluster, CreateResult, Instance, SizingSpec
from skydeck.assistant import AssistantClient
from skydeck.clusters.board import ClusterBoard
from skydeck.config import Settings, resolve_settings
from skydeck.conversation.classifier import AssistantSession
from skydeck.conversation.commands import Command
from skydeck.conversation.executor import CommandExecutor, Proposal
from skydeck.conversation.state import ConversationState, Message
from skydeck.core.exceptions import ProviderError, SkydeckError
from skydeck.credentials import CredentialsClient
from skydeck.infra.http import BearerAuth, HttpClient, HttpError
from skydeck.observability.logging import setup_logging, teardown_logging
from skydeck.preferences import PreferenceStore
from skydeck.providers.catalog import InstanceTypeCatalog, InstanceTypeOption
from skydeck.providers.hybrid import HybridProvisioner
from skydeck.providers.proxmox.adapter import ProxmoxAdapter
from skydeck.providers.registry import create_adapters

console = Console()

_EXIT_WORDS = frozenset({"exit", "quit", ":q"})

_STATUS_STYLE = {"running": "green", "stopped": "red", "unknown": "bright_black",
                 "active": "green", "mixed": "yellow"}

_PROVIDERS = ["proxmox", "gcp", "aws"]


def _http(settings: Settings) -> HttpClient:
    auth = BearerAuth(settings.token) if settings.token else None
    return HttpClient(settings.api_url, auth, timeout=settings.timeout)


# =============================================================================
# Rendering
# =============================================================================


def _render_message(message: Message) -> None:
    style = "bold cyan" if message.role == "user" else "white"
    label = "you" if message.role == "user" else "assistant"
    console.print(Text.assemble((f"{label:>9} ", "bright_black"), (message.text, style)))


def _instances_table(instances: Sequence[Instance], title: str) -> Table:
    table = Table(title=title, title_style="bold", title_justify="left")
    table.add_column("Name")
    table.add_column("ID", style="bright_black")
    table.add_column("Status")
    table.add_column("Location")
    table.add_column("vCPU", justify="right")
    table.add_column("RAM (GB)", justify="right")
    table.add_column("IP")
    for inst in instances:
        table.add_row(
            inst.name,
            inst.id,
            Text(inst.status, style=_STATUS_STYLE[inst.status]),
            inst.location,
            f"{inst.cpu:g}",
            f"{inst.ram_gb:g}",
            inst.ip or "-",
        )
    return table


def _clusters_table(clusters: Sequence[Cluster]) -> Table:
    table = Table(title="Clusters", title_style="bold", title_justify="left")
    table.add_column("Cluster")
    table.add_column("Provider")
    table.add_column("Nodes", justify="right")
    table.add_column("vCPU", justify="right")
    table.add_column("RAM (GB)", justify="right")
    table.add_column("Status")
    for c in clusters:
        status = c.derived_status
        table.add_row(
            c.base_name,
            c.provider.upper(),
            str(c.size),
            f"{c.cpu_total:g}",
            f"{c.ram_total:g}",
            Text(status, style=_STATUS_STYLE[status]),
        )
    return table


def _proposal_table(command: Command) -> Table | None:
    """Per-provider summary of a proposed command, or None when it carries no sizing."""
    if not command.parameters and not command.cluster_type:
        return None
    table = Table(title="Proposed cluster", title_style="bold", title_justify="left")
    table.add_column("Provider")
    table.add_column("Nodes", justify="right")
    table.add_column("Machine type")
    table.add_column("Zone / region")
    for provider, params in command.parameters.items():
        table.add_row(
            provider.upper(),
            str(params.count),
            params.machine_type or "-",
            params.location or "-",
        )
    if command.cluster_type:
        table.caption = f"Software: {command.cluster_type}"
    return table


def _spec_table(provider: str, spec: SizingSpec, swarm_nodes: int | None) -> Table:
    table = Table(show_header=False, title=f"Create on {provider.upper()}", title_justify="left")
    table.add_column("key", style="bright_black", min_width=12)
    table.add_column("value")
    table.add_row("Name", spec.name)
    if swarm_nodes is not None:
        table.add_row("Swarm nodes", str(swarm_nodes))
    else:
        table.add_row("Count", str(spec.count))
    table.add_row("vCPU", str(spec.cores))
    table.add_row("RAM (MB)", str(spec.memory_mb))
    table.add_row("Disk (GB)", str(spec.disk_gb))
    if provider == "proxmox":
        table.add_row("Type", spec.vm_type)
    else:
        table.add_row("Machine type", spec.machine_type or "auto")
        table.add_row("Location", spec.location or "default")
    if spec.cluster_type:
        table.add_row("Software", spec.cluster_type)
    return table


def _catalog_table(options: Sequence[InstanceTypeOption], title: str) -> Table:
    table = Table(title=title, title_style="bold", title_justify="left")
    table.add_column("Type")
    table.add_column("vCPU", justify="right")
    table.add_column("RAM (GB)", justify="right")
    table.add_column("$/hour", justify="right")
    for opt in options:
        price = f"{opt.price_per_hour:.4f}" if opt.price_per_hour is not None else "-"
        table.add_row(opt.name, f"{opt.vcpus:g}", f"{opt.memory_gb:g}", price)
    return table


def _report_create(provider: str, result: CreateResult) -> None:
    if not result.success:
        console.print(f"[red]✗ {provider.upper()}: {result.error or 'creation failed'}[/]")
        return
    created = ", ".join(result.created) or "request accepted"
    console.print(f"[green]✓ {provider.upper()}:[/] {created}")
    if result.password:
        console.print(f"  [bright_black]password:[/] {result.password}")


def _report_action(label: str, result: ActionResult) -> bool:
    if result.success:
        console.print(f"[green]✓ {label}[/]")
    else:
        console.print(f"[red]✗ {label}: {result.error or 'operation failed'}[/]")
    return result.success


async def _confirm(question: str, yes: bool) -> bool:
    if yes:
        return True
    return await asyncio.to_thread(Confirm.ask, question, default=False)


# =============================================================================
# Commands
# =============================================================================


async def _chat(settings: Settings, prefs: PreferenceStore) -> int:
    conversation = ConversationState.with_greeting()
    for message in conversation:
        _render_message(message)
    if not prefs.chat_bubble_dismissed:
        console.print("[bright_black]Type 'exit' to leave the conversation.[/]")
        prefs.dismiss_chat_bubble()

    def navigate(path: str) -> None:
        console.print(f"[bright_black]Run 'skydeck clusters' to manage it ({path}).[/]")

    async with _http(settings) as http:
        assistant = AssistantClient(http)
        session = AssistantSession(assistant, conversation)
        executor = CommandExecutor(
            assistant,
            conversation,
            navigator=navigate,
            management_path=settings.management_path,
            redirect_delay=settings.redirect_delay,
        )

        while True:
            try:
                prompt = await asyncio.to_thread(console.input, "[bold cyan]>[/] ")
            except (EOFError, KeyboardInterrupt):
                break
            if prompt.strip().lower() in _EXIT_WORDS:
                break

            with console.status("Thinking..."):
                reply = await session.send(prompt)
            if reply is None:
                continue
            _render_message(reply)
            if not reply.is_actionable:
                continue

            proposal = Proposal.from_message(reply)
            summary = _proposal_table(proposal.command)
            if summary is not None:
                console.print(summary)
            if not await _confirm("Execute this operation?", False):
                proposal.decline()
                console.print("[bright_black]Operation discarded.[/]")
                continue

            seen = len(conversation)
            with console.status("Executing..."):
                await executor.run(proposal.confirm())
            for message in conversation.messages[seen:]:
                _render_message(message)

        if executor.pending_redirect is not None:
            executor.pending_redirect.cancel()
    return 0


async def _clusters(settings: Settings) -> int:
    async with _http(settings) as http:
        board = ClusterBoard(create_adapters(settings.providers.values(), http))
        clusters = await board.refresh()
    if not clusters:
        console.print("[bright_black]No clusters found.[/]")
        return 0
    console.print(_clusters_table(clusters))
    return 0


async def _instances(settings: Settings, provider: str) -> int:
    config = settings.providers.get(provider)
    if config is None:
        console.print(f"[red]Provider '{provider}' is not configured.[/]")
        return 2
    async with _http(settings) as http:
        adapter = config.create_adapter(http)
        try:
            instances = await adapter.list()
        except ProviderError as e:
            console.print(f"[red]{e}[/]")
            return 1
    console.print(_instances_table(instances, f"{provider.upper()} instances"))
    return 0


async def _create(
    settings: Settings,
    provider: str,
    spec: SizingSpec,
    *,
    swarm_nodes: int | None = None,
    yes: bool = False,
) -> int:
    targets = ["gcp", "aws"] if provider == "hybrid" else [provider]
    missing = [p for p in targets if p not in settings.providers]
    if missing:
        console.print(f"[red]Provider '{missing[0]}' is not configured.[/]")
        return 2
    if swarm_nodes is not None and provider != "proxmox":
        console.print("[red]--swarm is only available on Proxmox.[/]")
        return 2
    if swarm_nodes is not None and swarm_nodes < 1:
        console.print("[red]A swarm needs at least one node.[/]")
        return 2

    console.print(_spec_table(provider, spec, swarm_nodes))
    if not await _confirm("Create these resources?", yes):
        console.print("[bright_black]Operation discarded.[/]")
        return 0

    async with _http(settings) as http:
        adapters = {p: settings.providers[p].create_adapter(http) for p in targets}
        match provider:
            case "hybrid":
                hybrid = await HybridProvisioner(adapters["gcp"], adapters["aws"], http).create_all(spec)
                results = {"gcp": hybrid.gcp, "aws": hybrid.aws}
            case "proxmox" if swarm_nodes is not None:
                results = {provider: await adapters[provider].create_swarm(spec.name, spec, swarm_nodes)}
            case _:
                results = {provider: await adapters[provider].create(spec)}

    for name, result in results.items():
        _report_create(name, result)
    return 0 if any(r.success for r in results.values()) else 1


async def _instance_types(
    settings: Settings,
    provider: str,
    *,
    location: str | None = None,
    cpu: int | None = None,
    ram: float | None = None,
) -> int:
    async with _http(settings) as http:
        try:
            options = await InstanceTypeCatalog(http).lookup(provider, location=location, cpu=cpu, ram=ram)
        except HttpError as e:
            console.print(f"[red]Instance type lookup failed: {e.detail}[/]")
            return 1
    if not options:
        console.print("[bright_black]No matching instance types.[/]")
        return 0
    console.print(_catalog_table(options, f"{provider.upper()} instance types"))
    return 0


def _find_instance(instances: Sequence[Instance], name: str, location: str | None) -> Instance | None:
    return next(
        (
            inst for inst in instances
            if name in (inst.name, inst.id) and (location is None or inst.location == location)
        ),
        None,
    )


async def _instance_action(
    settings: Settings,
    action: str,
    provider: str,
    name: str,
    *,
    location: str | None = None,
    yes: bool = False,
) -> int:
    config = settings.providers.get(provider)
    if config is None:
        console.print(f"[red]Provider '{provider}' is not configured.[/]")
        return 2
    async with _http(settings) as http:
        adapter = config.create_adapter(http)
        if action == "restart" and not isinstance(adapter, ProxmoxAdapter):
            console.print("[red]Restart is only available on Proxmox.[/]")
            return 2
        try:
            instances = await adapter.list()
        except ProviderError as e:
            console.print(f"[red]{e}[/]")
            return 1
        instance = _find_instance(instances, name, location)
        if instance is None:
            console.print(f"[yellow]No {provider.upper()} instance named '{name}'.[/]")
            return 1

        if not await _confirm(f"{action.capitalize()} {instance.name} on {provider.upper()}?", yes):
            console.print("[bright_black]Operation discarded.[/]")
            return 0
        if action == "restart":
            result = await adapter.restart(instance.id)
        else:
            result = await ClusterBoard({provider: adapter}).instance_action(instance, action)
    return 0 if _report_action(f"{action} {instance.name}", result) else 1


async def _delete_cluster(settings: Settings, provider: str, base_name: str, *, yes: bool = False) -> int:
    config = settings.providers.get(provider)
    if config is None:
        console.print(f"[red]Provider '{provider}' is not configured.[/]")
        return 2
    async with _http(settings) as http:
        board = ClusterBoard({provider: config.create_adapter(http)})
        await board.refresh()
        cluster = board.find(provider, base_name)
        if cluster is None:
            console.print(f"[yellow]No {provider.upper()} cluster named '{base_name}'.[/]")
            return 1

        console.print(_instances_table(cluster.instances, f"Cluster {base_name}"))
        if not await _confirm(f"Delete all {cluster.size} nodes of {base_name}?", yes):
            console.print("[bright_black]Operation discarded.[/]")
            return 0
        results = await board.delete_cluster(cluster)

    ok = [
        _report_action(f"delete {inst.name}", result)
        for inst, result in zip(cluster.instances, results, strict=True)
    ]
    return 0 if all(ok) else 1


async def _credentials(settings: Settings, name: str) -> int:
    async with _http(settings) as http:
        creds = await CredentialsClient(http).lookup(name)
    if creds is None:
        console.print(f"[yellow]No credentials available for '{name}'.[/]")
        return 1
    table = Table(show_header=False, title=f"SSH credentials for {name}", title_justify="left")
    table.add_column("key", style="bright_black", min_width=10)
    table.add_column("value")
    table.add_row("Username", creds.username)
    table.add_row("Password", creds.password)
    table.add_row("IP", creds.ip)
    table.add_row("SSH", Text(creds.ssh_command, style="magenta"))
    console.print(table)
    return 0


def _consent(prefs: PreferenceStore, choice: str) -> int:
    match choice:
        case "accept":
            prefs.accept()
        case "reject":
            prefs.reject()
    console.print(f"Preference storage {prefs.consent}.")
    return 0


# =============================================================================
# Entry point
# =============================================================================


def _sizing(args: argparse.Namespace) -> SizingSpec:
    return SizingSpec(
        name=args.name,
        cores=args.cores,
        memory_mb=args.memory,
        disk_gb=args.disk,
        count=args.count,
        cluster_type=args.cluster_type,
        password=args.password,
        vm_type=args.vm_type,
        machine_type=args.machine_type,
        location=args.location,
    )


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="skydeck", description="Multi-cloud operator console")
    parser.add_argument(
        "--project-dir", type=Path, default=None,
        help="Directory holding skydeck.toml (defaults to the current directory)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    confirm = argparse.ArgumentParser(add_help=False)
    confirm.add_argument("-y", "--yes", action="store_true", help="Skip the confirmation prompt")

    sub.add_parser("chat", help="Talk to the infrastructure assistant")
    sub.add_parser("clusters", help="List clusters across providers")
    instances = sub.add_parser("instances", help="List one provider's instances")
    instances.add_argument("provider", choices=_PROVIDERS)

    create = sub.add_parser("create", parents=[confirm], help="Create instances or a cluster")
    create.add_argument("provider", choices=[*_PROVIDERS, "hybrid"])
    create.add_argument("name", help="Instance name, or name prefix when --count > 1")
    create.add_argument("--cores", type=int, default=2)
    create.add_argument("--memory", type=int, default=2048, help="Memory per instance in MB")
    create.add_argument("--disk", type=int, default=10, help="Disk per instance in GB")
    create.add_argument("--count", type=int, default=1)
    create.add_argument("--machine-type", default=None, help="Cloud machine type (derived when omitted)")
    create.add_argument("--location", default=None, help="Zone (GCP) or region (AWS)")
    create.add_argument("--cluster-type", default=None, help="Software stack, e.g. docker-swarm")
    create.add_argument("--password", default=None)
    create.add_argument("--vm-type", choices=["qemu", "lxc"], default="qemu")
    create.add_argument(
        "--swarm", type=int, default=None, metavar="NODES",
        help="Proxmox only: create a Docker Swarm with this many nodes",
    )

    types = sub.add_parser("instance-types", help="Look up cloud instance types")
    types.add_argument("provider", choices=["gcp", "aws"])
    types.add_argument("--location", default=None, help="Zone (GCP) or region (AWS)")
    types.add_argument("--cpu", type=int, default=None)
    types.add_argument("--ram", type=float, default=None, help="Memory in GB")

    for action in ("start", "stop", "restart", "delete"):
        choices = ["proxmox"] if action == "restart" else _PROVIDERS
        cmd = sub.add_parser(action, parents=[confirm], help=f"{action.capitalize()} one instance")
        cmd.add_argument("provider", choices=choices)
        cmd.add_argument("name", help="Instance name or ID")
        cmd.add_argument("--location", default=None, help="Only match instances in this zone or region")

    delete_cluster = sub.add_parser("delete-cluster", parents=[confirm], help="Delete every node of a cluster")
    delete_cluster.add_argument("provider", choices=_PROVIDERS)
    delete_cluster.add_argument("base_name")

    credentials = sub.add_parser("credentials", help="Show SSH credentials for an instance")
    credentials.add_argument("name")
    consent = sub.add_parser("consent", help="Allow or refuse storing preferences")
    consent.add_argument("choice", choices=["accept", "reject"])
    return parser


async def _dispatch(args: argparse.Namespace, settings: Settings, prefs: PreferenceStore) -> int:
    match args.command:
        case "chat":
            return await _chat(settings, prefs)
        case "clusters":
            return await _clusters(settings)
        case "instances":
            return await _instances(settings, args.provider)
        case "create":
            return await _create(
                settings, args.provider, _sizing(args), swarm_nodes=args.swarm, yes=args.yes,
            )
        case "instance-types":
            return await _instance_types(
                settings, args.provider, location=args.location, cpu=args.cpu, ram=args.ram,
            )
        case "start" | "stop" | "restart" | "delete":
            return await _instance_action(
                settings, args.command, args.provider, args.name, location=args.location, yes=args.yes,
            )
        case "delete-cluster":
            return await _delete_cluster(settings, args.provider, args.base_name, yes=args.yes)
        case "credentials":
            return await _credentials(settings, args.name)
        case "consent":
            return _consent(prefs, args.choice)
        case _:
            raise ValueError(f"Unknown command '{args.command}'")


def main(argv: Sequence[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    try:
        settings = resolve_settings(project_dir=args.project_dir)
    except SkydeckError as e:
        console.print(f"[red]{e}[/]")
        return 2

    log_config = settings.logging
    if args.verbose:
        log_config = replace(log_config, console=True, level="DEBUG")
    handler_ids = setup_logging(log_config)

    prefs = PreferenceStore(settings.preferences_path).load()
    try:
        return asyncio.run(_dispatch(args, settings, prefs))
    except KeyboardInterrupt:
        return 130
    finally:
        teardown_logging(handler_ids)


if __name__ == "__main__":
    sys.exit(main())
