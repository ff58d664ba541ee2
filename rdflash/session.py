"""
RD60xx device session.

This module provides the protocol engine that puts a power supply into
bootloader mode, identifies it and pushes a firmware image to it.

The session implements a state machine for the flashing sequence:
    IDLE -> detect_bootloader() -> BOOTLOADER_CONFIRMED | LEGACY_DETECTED
    LEGACY_DETECTED -> request_reboot() -> REBOOT_REQUESTED -> BOOTLOADER_CONFIRMED
    BOOTLOADER_CONFIRMED -> query_identity() -> IDENTITY_KNOWN
    IDENTITY_KNOWN -> validate_model() -> MODEL_VALIDATED
    MODEL_VALIDATED -> transfer_firmware() -> TRANSFERRING -> COMPLETE

Any error moves the session to FAILED. Nothing is retried: an aborted
transfer may leave the device partially programmed and the bootloader is
responsible for refusing to boot it.

Example:
    >>> from rdflash.session import DeviceSession
    >>> from rdflash.transport import SerialTransport
    >>>
    >>> with DeviceSession(SerialTransport("/dev/ttyUSB0")) as session:
    ...     identity = session.flash(image)
"""

from __future__ import annotations

import logging
import time
from enum import Enum, auto
from typing import TYPE_CHECKING, Callable

from rdflash.exceptions import ProtocolError, SessionStateError, TimeoutError
from rdflash.models.records import DeviceIdentity, FirmwareImage, SessionSettings
from rdflash.models.registry import SupportedModel, require_supported_model
from rdflash.protocol.constants import (
    READ_IDENTITY_REQUEST,
    REBOOT_REQUEST,
    ProtocolConstants,
    Token,
)
from rdflash.protocol.frames import parse_info_response, parse_register_response

if TYPE_CHECKING:
    from rdflash.transport.abc import AbstractTransport

# Module logger
logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]
"""Called with (chunks_sent, chunks_total) after every acknowledged chunk."""


class SessionState(Enum):
    """Device session states."""

    IDLE = auto()
    """Nothing sent yet."""

    BOOTLOADER_UNCONFIRMED = auto()
    """Bootloader query sent, reply pending."""

    LEGACY_DETECTED = auto()
    """Device runs its normal firmware and must be rebooted."""

    REBOOT_REQUESTED = auto()
    """Reboot into the bootloader acknowledged, device restarting."""

    BOOTLOADER_CONFIRMED = auto()
    """Device is in bootloader mode."""

    IDENTITY_KNOWN = auto()
    """Bootloader reported model, serial number and version."""

    MODEL_VALIDATED = auto()
    """Model code found in the registry; transfer allowed."""

    TRANSFERRING = auto()
    """Firmware chunks are being written."""

    COMPLETE = auto()
    """Every chunk was acknowledged."""

    FAILED = auto()
    """A phase failed; the session cannot continue."""


class DeviceSession:
    """
    Protocol engine for one RD60xx device.

    The session exclusively owns its transport. Phase operations must be
    called in order; ``flash()`` runs the whole sequence.

    Attributes:
        state: Current session state.
        identity: Identity reported by the bootloader (after query_identity()).
        detected_identity: Identity read over Modbus when the device had to
            be rebooted into the bootloader.

    Example:
        >>> session = DeviceSession(transport, SessionSettings(verbose=True))
        >>> session.enter_bootloader()
        >>> identity = session.query_identity()
        >>> session.validate_model()
        >>> session.transfer_firmware(image)
    """

    def __init__(
        self,
        transport: AbstractTransport,
        settings: SessionSettings | None = None,
        progress: ProgressCallback | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize the session.

        Args:
            transport: Transport to the device, opened or not.
            settings: Timeouts, chunk size and verbosity.
            progress: Optional callback invoked after every acknowledged chunk.
            sleep: Function used for the post-reboot settle delay.
        """
        self._transport = transport
        self._settings = settings or SessionSettings()
        self._progress = progress
        self._sleep = sleep
        self._state = SessionState.IDLE
        self._identity: DeviceIdentity | None = None
        self._detected_identity: DeviceIdentity | None = None
        self._model: SupportedModel | None = None

    @property
    def state(self) -> SessionState:
        """Get the current session state."""
        return self._state

    @property
    def settings(self) -> SessionSettings:
        return self._settings

    @property
    def transport(self) -> AbstractTransport:
        """Get the underlying transport."""
        return self._transport

    @property
    def identity(self) -> DeviceIdentity | None:
        """Get the identity reported by the bootloader."""
        return self._identity

    @property
    def detected_identity(self) -> DeviceIdentity | None:
        """Get the identity read over Modbus before the reboot, if any."""
        return self._detected_identity

    @property
    def model(self) -> SupportedModel | None:
        """Get the validated model."""
        return self._model

    def detect_bootloader(self) -> bool:
        """
        Ask the device whether it is running its bootloader.

        Sends ``queryd`` and reads up to 4 bytes. Anything other than
        ``boot`` (including silence) means the normal firmware is running.

        Returns:
            True if the device is already in bootloader mode.

        Raises:
            SessionStateError: If the session is not IDLE.
            TransportError: If the link fails.
        """
        self._require_state("detect bootloader", SessionState.IDLE)
        logger.info("Checking if device is in bootloader mode")

        try:
            self._state = SessionState.BOOTLOADER_UNCONFIRMED
            self._transport.set_deadline(self._settings.discovery_timeout)
            self._write(Token.QUERY)
            reply = self._read(len(Token.BOOT))
        except Exception:
            self._fail()
            raise

        if reply == Token.BOOT:
            logger.info("Device is in bootloader mode")
            self._state = SessionState.BOOTLOADER_CONFIRMED
            return True

        logger.info("Device is not in bootloader mode")
        self._state = SessionState.LEGACY_DETECTED
        return False

    def request_reboot(self) -> DeviceIdentity:
        """
        Reboot a device running normal firmware into its bootloader.

        Identifies the device over Modbus, writes the reboot command and
        waits for the settle interval.

        Returns:
            Identity read from the holding registers (no serial number).

        Raises:
            SessionStateError: If the session is not LEGACY_DETECTED.
            TimeoutError: If the device does not answer the register read.
            ProtocolError: If a reply is malformed or the reboot is refused.
        """
        self._require_state("request reboot", SessionState.LEGACY_DETECTED)

        try:
            self._transport.set_deadline(self._settings.flash_timeout)

            self._write(READ_IDENTITY_REQUEST)
            response = self._read(ProtocolConstants.REGISTER_RESPONSE_SIZE)
            if not response:
                raise TimeoutError(
                    "No response from device",
                    timeout_seconds=self._settings.flash_timeout,
                )

            identity = parse_register_response(response, phase=self._state.name)
            self._detected_identity = identity
            logger.info("Found device via Modbus: %s", identity)

            logger.info("Rebooting into bootloader mode")
            self._write(REBOOT_REQUEST)
            self._state = SessionState.REBOOT_REQUESTED

            ack = self._read(1)
            if ack != bytes([Token.REBOOT_ACK]):
                raise ProtocolError("Failed to reboot device", data=ack, phase=self._state.name)

            logger.debug("Waiting %.1fs for the device to restart", self._settings.settle_delay)
            self._sleep(self._settings.settle_delay)
        except Exception:
            self._fail()
            raise

        self._state = SessionState.BOOTLOADER_CONFIRMED
        return identity

    def enter_bootloader(self) -> bool:
        """
        Make sure the device is in bootloader mode.

        Returns:
            True if it already was, False if it had to be rebooted.
        """
        if self.detect_bootloader():
            return True
        self.request_reboot()
        return False

    def query_identity(self) -> DeviceIdentity:
        """
        Read model, firmware version and serial number from the bootloader.

        Raises:
            SessionStateError: If the bootloader is not confirmed.
            TimeoutError: If the bootloader does not answer.
            ProtocolError: If the reply is malformed.
        """
        self._require_state("query identity", SessionState.BOOTLOADER_CONFIRMED)

        try:
            self._write(Token.GET_INFO)
            response = self._read(ProtocolConstants.INFO_RESPONSE_SIZE)
            if not response:
                raise TimeoutError(
                    "No response from bootloader",
                    timeout_seconds=self._transport.deadline,
                )
            identity = parse_info_response(response, phase=self._state.name)
        except Exception:
            self._fail()
            raise

        self._identity = identity
        self._state = SessionState.IDENTITY_KNOWN
        logger.info("Device information from bootloader: %s", identity)
        return identity

    def validate_model(self) -> SupportedModel:
        """
        Check the identified model against the registry.

        Raises:
            SessionStateError: If the identity is not known yet.
            UnsupportedModelError: If the model code is not registered.
        """
        self._require_state("validate model", SessionState.IDENTITY_KNOWN)

        try:
            model = require_supported_model(self._identity.model_code)
        except Exception:
            self._fail()
            raise

        self._model = model
        self._state = SessionState.MODEL_VALIDATED
        logger.debug("Model %d is supported", model)
        return model

    def transfer_firmware(self, image: FirmwareImage) -> int:
        """
        Write the firmware image chunk by chunk.

        Every chunk must be answered with ``OK``; the first mismatch aborts
        the transfer and nothing further is written.

        Args:
            image: Firmware to transfer.

        Returns:
            Number of chunks written.

        Raises:
            SessionStateError: If the model has not been validated.
            ProtocolError: If the bootloader refuses to start or rejects a
                chunk (chunk_index is set for the latter).
        """
        self._require_state("transfer firmware", SessionState.MODEL_VALIDATED)

        chunk_size = self._settings.chunk_size
        total = image.chunk_count(chunk_size)
        sent = 0

        try:
            self._state = SessionState.TRANSFERRING
            self._transport.set_deadline(self._settings.flash_timeout)

            self._write(Token.UPDATE_FIRMWARE)
            reply = self._read(len(Token.READY))
            if reply != Token.READY:
                raise ProtocolError(
                    "Failed to initiate flashing", data=reply, phase=self._state.name
                )

            logger.info("Updating firmware: %d bytes in %d chunks", image.size, total)
            for index, chunk in enumerate(image.chunks(chunk_size)):
                self._write(chunk)
                ack = self._read(len(Token.CHUNK_OK))
                if ack != Token.CHUNK_OK:
                    raise ProtocolError(
                        "Flash failed",
                        data=ack,
                        phase=self._state.name,
                        chunk_index=index,
                    )
                sent += 1
                if self._progress is not None:
                    self._progress(sent, total)
        except Exception:
            logger.error("Transfer aborted after %d/%d chunks", sent, total)
            self._fail()
            raise

        self._state = SessionState.COMPLETE
        logger.info("Firmware update complete")
        return sent

    def flash(self, image: FirmwareImage | None = None) -> DeviceIdentity:
        """
        Run the whole sequence.

        Without an image the session stops after validating the model,
        which identifies the device without touching its firmware.

        Returns:
            Identity reported by the bootloader.
        """
        self.enter_bootloader()
        identity = self.query_identity()
        self.validate_model()
        if image is not None:
            self.transfer_firmware(image)
        return identity

    def _write(self, data: bytes) -> None:
        if self._settings.verbose:
            logger.debug("Write: %d: %s", len(data), data.hex(" "))
        self._transport.write_all(data)

    def _read(self, count: int) -> bytes:
        if self._settings.verbose:
            logger.debug("Waiting for %d bytes", count)
        data = self._transport.read_up_to(count)
        if self._settings.verbose:
            logger.debug("Read: %d: %s", len(data), data.hex(" "))
        return data

    def _require_state(self, action: str, expected: SessionState) -> None:
        if self._state != expected:
            raise SessionStateError(
                f"Cannot {action}: session is in {self._state.name} state"
            )

    def _fail(self) -> None:
        logger.debug("Session failed in %s state", self._state.name)
        self._state = SessionState.FAILED

    def __enter__(self) -> DeviceSession:
        """Context manager entry - opens the transport."""
        if not self._transport.is_open:
            self._transport.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - closes the transport."""
        if self._transport.is_open:
            self._transport.close()

    def __repr__(self) -> str:
        model = self._identity.model_code if self._identity else None
        return f"DeviceSession(state={self._state.name}, model={model})"
