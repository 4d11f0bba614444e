"""
MIDI transport for the mapping.

Input is read on a background thread into a bounded queue. Nothing from that
thread reaches the mapping: queued messages are only handed to the dispatch
callback from process_pending_messages(), on the thread that calls it, so
input handling, engine notifications and blink ticks stay serial.
"""

import queue
import threading
import time
from typing import Callable, Optional, Sequence

import mido

from deckbound.logging_config import get_logger

logger = get_logger(__name__)

QUEUE_SIZE = 1000
POLL_INTERVAL = 0.001


class MIDIInterface:
    """
    mido ports plus a background reader.

    Output is fire-and-forget: send_message() logs failures and reports them
    through its return value, it never raises.
    """

    def __init__(self, on_message: Callable[[mido.Message], None]):
        """
        Args:
            on_message: Dispatch callback, called from process_pending_messages()
        """
        self._on_message = on_message

        self._input_port: Optional[mido.ports.BaseInput] = None
        self._output_port: Optional[mido.ports.BaseOutput] = None
        self._input_port_name: Optional[str] = None
        self._output_port_name: Optional[str] = None

        self._running = threading.Event()
        self._reader: Optional[threading.Thread] = None
        self._inbox: queue.Queue = queue.Queue(maxsize=QUEUE_SIZE)
        self._port_lock = threading.Lock()

        self._dropped = 0
        self._dispatched = 0

    @property
    def is_connected(self) -> bool:
        with self._port_lock:
            return self._input_port is not None or self._output_port is not None

    @property
    def input_port_name(self) -> Optional[str]:
        return self._input_port_name

    @property
    def output_port_name(self) -> Optional[str]:
        return self._output_port_name

    def connect(self, input_port_name: Optional[str] = None, output_port_name: Optional[str] = None) -> None:
        """
        Open ports and start the reader thread.

        Args:
            input_port_name: Input port to open (None to skip input)
            output_port_name: Output port to open (None to skip output)

        Raises:
            ValueError: If both port names are None
            IOError: If a port cannot be opened
        """
        if input_port_name is None and output_port_name is None:
            raise ValueError("At least one port (input or output) must be specified")

        with self._port_lock:
            try:
                if input_port_name:
                    self._input_port = mido.open_input(input_port_name)
                    self._input_port_name = input_port_name
                    logger.info(f"Opened MIDI input port: {input_port_name}")

                if output_port_name:
                    self._output_port = mido.open_output(output_port_name)
                    self._output_port_name = output_port_name
                    logger.info(f"Opened MIDI output port: {output_port_name}")

            except Exception as e:
                self._close_ports()
                raise IOError(f"Failed to open MIDI ports: {e}") from e

        if self._input_port is not None:
            self._running.set()
            self._reader = threading.Thread(target=self._read_loop, daemon=True, name="DeckboundMIDIReader")
            self._reader.start()
            logger.debug("Started MIDI reader thread")

    def disconnect(self) -> None:
        """Stop the reader, close ports and dispatch whatever is still queued."""
        if self._reader is not None and self._reader.is_alive():
            self._running.clear()
            self._reader.join(timeout=2.0)
            if self._reader.is_alive():
                logger.warning("MIDI reader thread did not stop")
        self._reader = None

        with self._port_lock:
            self._close_ports()

        remaining = self.process_pending_messages()
        if remaining:
            logger.debug(f"Dispatched {remaining} queued messages on disconnect")
        logger.debug(f"MIDI interface closed: {self.get_stats()}")

    def _close_ports(self) -> None:
        for attr, name_attr in (("_input_port", "_input_port_name"), ("_output_port", "_output_port_name")):
            port = getattr(self, attr)
            if port is None:
                continue
            try:
                port.close()
                logger.info(f"Closed MIDI port: {getattr(self, name_attr)}")
            except Exception as e:
                logger.error(f"Error closing MIDI port {getattr(self, name_attr)}: {e}")
            finally:
                setattr(self, attr, None)
                setattr(self, name_attr, None)

    def _read_loop(self) -> None:
        while self._running.is_set():
            try:
                with self._port_lock:
                    if self._input_port is None:
                        break
                    for msg in self._input_port.iter_pending():
                        try:
                            self._inbox.put_nowait(msg)
                        except queue.Full:
                            self._dropped += 1
                            if self._dropped % 100 == 0:
                                logger.warning(f"Dropped {self._dropped} MIDI messages (queue full)")

                time.sleep(POLL_INTERVAL)

            except Exception as e:
                logger.exception(f"Error reading MIDI input: {e}")

        logger.debug("MIDI reader stopped")

    def process_pending_messages(self) -> int:
        """
        Dispatch every queued input message on the calling thread.

        Returns:
            Number of messages dispatched
        """
        count = 0
        while True:
            try:
                msg = self._inbox.get_nowait()
            except queue.Empty:
                break

            try:
                self._on_message(msg)
            except Exception as e:
                logger.exception(f"Error dispatching MIDI message {msg}: {e}")
            self._dispatched += 1
            count += 1

        return count

    def send_message(self, msg: mido.Message) -> bool:
        """
        Write a message to the output port.

        Returns:
            True if sent, False if there is no output port or the write failed
        """
        with self._port_lock:
            if self._output_port is None:
                logger.warning(f"Cannot send {msg.type}: no output port connected")
                return False

            try:
                self._output_port.send(msg)
                return True
            except Exception as e:
                logger.error(f"Error sending MIDI message: {e}")
                return False

    def get_stats(self) -> dict[str, int]:
        return {
            "dispatched": self._dispatched,
            "dropped": self._dropped,
            "queued": self._inbox.qsize(),
        }

    # Port discovery

    @staticmethod
    def list_input_ports() -> list[str]:
        try:
            return mido.get_input_names()
        except Exception as e:
            logger.error(f"Failed to list input ports: {e}")
            return []

    @staticmethod
    def list_output_ports() -> list[str]:
        try:
            return mido.get_output_names()
        except Exception as e:
            logger.error(f"Failed to list output ports: {e}")
            return []

    @staticmethod
    def find_ports(patterns: Sequence[str]) -> tuple[list[str], list[str]]:
        """
        Find ports whose name contains any of the patterns (case-insensitive).

        Args:
            patterns: Substrings to look for, e.g. a plugin's port_patterns

        Returns:
            (input_ports, output_ports)
        """
        lowered = [p.lower() for p in patterns]

        def matches(name: str) -> bool:
            return any(p in name.lower() for p in lowered)

        inputs = [name for name in MIDIInterface.list_input_ports() if matches(name)]
        outputs = [name for name in MIDIInterface.list_output_ports() if matches(name)]
        return inputs, outputs

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
        return False
