"""Digital outputs whose state is fully defined by what is written to them."""

from __future__ import annotations

from collections.abc import Callable

from tacd.gpio import Line, LineHandle, LineRequestFlags, find_line

__all__ = ["CONSUMER", "DigitalOutput", "DigitalIo"]

CONSUMER = "tacd"

LedSetter = Callable[[float], None]
LineFinder = Callable[[str], "Line | None"]


class DigitalOutput:
    """A write-only GPIO line, optionally mirrored on an LED.

    Whatever value is set *is* the line status. ``inverted`` flips the level
    driven onto the line relative to the logical value.
    """

    def __init__(
        self,
        path: str,
        line_name: str,
        initial: bool,
        inverted: bool,
        led: LedSetter | None = None,
        line_finder: LineFinder = find_line,
    ) -> None:
        line = line_finder(line_name)
        if line is None:
            raise LookupError(f"GPIO line {line_name} not found")

        self.path = path
        self.line_name = line_name
        self.inverted = inverted
        self.led = led
        self.value = initial
        self._handle: LineHandle = line.request(
            LineRequestFlags.OUTPUT, int(initial ^ inverted), CONSUMER
        )

    def set(self, value: bool) -> None:
        """Drive the line and update the LED."""
        self.value = value
        self._handle.set_value(int(value ^ self.inverted))
        if self.led is not None:
            self.led(1.0 if value else 0.0)


class DigitalIo:
    """The general purpose outputs and the UART enable lines."""

    def __init__(
        self,
        led_0: LedSetter | None = None,
        led_1: LedSetter | None = None,
        line_finder: LineFinder = find_line,
    ) -> None:
        self.out_0 = DigitalOutput(
            "/v1/output/out_0/asserted", "OUT_0", False, False, led_0, line_finder
        )
        self.out_1 = DigitalOutput(
            "/v1/output/out_1/asserted", "OUT_1", False, False, led_1, line_finder
        )
        self.uart_rx_en = DigitalOutput(
            "/v1/uart/rx/enabled", "UART_RX_EN", True, True, None, line_finder
        )
        self.uart_tx_en = DigitalOutput(
            "/v1/uart/tx/enabled", "UART_TX_EN", True, True, None, line_finder
        )

    def outputs(self) -> dict[str, DigitalOutput]:
        """All outputs keyed by their topic path."""
        return {
            output.path: output
            for output in (self.out_0, self.out_1, self.uart_rx_en, self.uart_tx_en)
        }