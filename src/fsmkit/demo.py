"""Demo: order workflow driven by a state machine

Shows local and global transitions, an exit hook veto, an entry hook that
chains an internal trigger, and the busy rejection of a concurrent trigger.

Run with: python -m fsmkit.demo
"""

import asyncio

from rich.console import Console
from rich.table import Table

from . import config
from .machine import BusyError, State, StateMachine
from .telemetry import configure_logging

console = Console()


def build_machine(order: dict) -> StateMachine:
    """Build the order workflow machine around a shared order dict."""
    machine = StateMachine("Order Workflow", context=order)

    async def require_items(state: State, ctx: dict) -> bool:
        # Veto leaving "pending" until the cart has items
        return bool(ctx["items"])

    async def auto_pack(state: State, ctx: dict) -> None:
        await asyncio.sleep(0.05)
        ctx["packed"] = True
        await state.trigger_internal("pack")

    pending = machine.create_state("Pending", exit_action=require_items)
    paid = machine.create_state("Paid", entry_action=auto_pack)
    packed = machine.create_state("Packed")
    shipped = machine.create_state("Shipped", is_complete=True)
    cancelled = machine.create_state("Cancelled", is_complete=True)

    pending.add_transition("pay", paid)
    paid.add_transition("pack", packed)
    packed.add_transition("ship", shipped)
    machine.add_global_transition("cancel", cancelled)
    return machine


def render_history(machine: StateMachine) -> Table:
    table = Table(title=f"{machine.name} history")
    table.add_column("Trigger")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Result")
    for record in machine.history:
        table.add_row(
            record.trigger or "-",
            record.from_state or "(none)",
            record.to_state,
            "[green]ok[/green]" if record.success else "[red]vetoed[/red]",
        )
    return table


async def run_demo() -> StateMachine:
    order: dict = {"items": [], "packed": False}
    machine = build_machine(order)

    await machine.start()
    console.print(f"Started in [bold]{machine.current_state.name}[/bold]")

    await machine.trigger("pay")
    console.print(f"Empty cart, still in [bold]{machine.current_state.name}[/bold]")

    order["items"].append("book")
    first = asyncio.create_task(machine.trigger("pay"))
    await asyncio.sleep(0)
    try:
        await machine.trigger("ship")
    except BusyError as e:
        console.print(f"[yellow]{e}[/yellow]")
    await first
    console.print(f"Now in [bold]{machine.current_state.name}[/bold] (packed={order['packed']})")

    await machine.trigger("ship")
    console.print(f"Complete: {machine.is_complete}")

    console.print(render_history(machine))
    return machine


def main():
    """Run the demo"""
    configure_logging(config.LOG_LEVEL)
    asyncio.run(run_demo())


if __name__ == "__main__":
    main()
