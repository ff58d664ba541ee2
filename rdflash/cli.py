"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from rdflash.exceptions import RDFlashError
from rdflash.firmware import load_firmware
from rdflash.models.records import SessionSettings
from rdflash.ports import list_serial_ports
from rdflash.protocol.constants import ProtocolConstants
from rdflash.session import DeviceSession
from rdflash.transport.serial_sync import SerialTransport

app = typer.Typer(
    help="Firmware updater for Riden RD60xx power supplies.",
    add_completion=False,
)


def _print_ports() -> None:
    ports = list_serial_ports()
    typer.echo("Available serial ports:")
    if not ports:
        typer.echo("  No ports found")
        return

    width = max(len("Port"), *(len(p.port) for p in ports))
    typer.echo(f" {'Port':<{width}} | {'Type':<9} | Info")
    typer.echo(f"-{'-' * width}-+-{'-' * 9}-+------")
    for port in ports:
        typer.echo(f" {port.port:<{width}} | {port.kind:<9} | {port.info}")


def _print_progress(sent: int, total: int) -> None:
    typer.echo(".", nl=False)
    if sent == total:
        typer.echo()


@app.command()
def main(
    port: str | None = typer.Argument(None, help="Serial port device (e.g. /dev/ttyUSB0 or COM3)"),
    firmware: Path | None = typer.Argument(None, help="Firmware file to flash"),
    list_ports: bool = typer.Option(False, "--list", "-l", help="List available serial ports and exit"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    speed: int = typer.Option(
        ProtocolConstants.DEFAULT_BAUD_RATE, "--speed", "-s", help="Serial port baud rate"
    ),
) -> None:
    """Put the device into bootloader mode, identify it and flash FIRMWARE.

    Without FIRMWARE the device is only identified.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        force=True,
    )

    try:
        if list_ports:
            _print_ports()
            return

        if port is None:
            typer.echo("Error: PORT is required unless --list is given", err=True)
            raise typer.Exit(code=2)

        typer.echo(f"Serial port: {port} ({speed} bps)")

        image = None
        if firmware is not None:
            image = load_firmware(firmware)
            typer.echo(f"Firmware image size: {image.size} bytes")

        settings = SessionSettings(verbose=verbose)
        transport = SerialTransport(port, baudrate=speed, timeout=settings.discovery_timeout)
        with DeviceSession(transport, settings, progress=_print_progress) as session:
            session.enter_bootloader()
            identity = session.query_identity()
            typer.echo("Device information from bootloader:")
            typer.echo(f"    Model: {identity.model_name} ({identity.model_code})")
            typer.echo(f" Firmware: v{identity.version_string}")
            typer.echo(f"      S/N: {identity.serial_number:08d}")
            session.validate_model()

            if image is not None:
                session.transfer_firmware(image)
                typer.echo("Firmware update complete.")
    except RDFlashError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
