import pytest

from tacd.digital_io import DigitalIo, DigitalOutput
from tacd.gpio import LineRegistry


@pytest.fixture
def registry():
    return LineRegistry()


def test_initial_line_levels(registry):
    DigitalIo(line_finder=registry.find_line)
    assert registry.find_line("OUT_0").stub_get() == 0
    assert registry.find_line("OUT_1").stub_get() == 0
    # enabled but inverted: driven low
    assert registry.find_line("UART_RX_EN").stub_get() == 0
    assert registry.find_line("UART_TX_EN").stub_get() == 0


def test_initial_logical_values(registry):
    io = DigitalIo(line_finder=registry.find_line)
    assert io.out_0.value is False
    assert io.uart_rx_en.value is True


def test_set_output_drives_line_and_led(registry):
    brightness = []
    io = DigitalIo(led_0=brightness.append, line_finder=registry.find_line)
    io.out_0.set(True)
    assert registry.find_line("OUT_0").stub_get() == 1
    io.out_0.set(False)
    assert registry.find_line("OUT_0").stub_get() == 0
    assert brightness == [1.0, 0.0]


def test_leds_are_separate(registry):
    led_0, led_1 = [], []
    io = DigitalIo(led_0=led_0.append, led_1=led_1.append, line_finder=registry.find_line)
    io.out_1.set(True)
    assert led_0 == []
    assert led_1 == [1.0]


def test_inverted_uart_enable(registry):
    io = DigitalIo(line_finder=registry.find_line)
    io.uart_tx_en.set(False)
    assert registry.find_line("UART_TX_EN").stub_get() == 1
    io.uart_tx_en.set(True)
    assert registry.find_line("UART_TX_EN").stub_get() == 0


def test_outputs_keyed_by_path(registry):
    io = DigitalIo(line_finder=registry.find_line)
    outputs = io.outputs()
    assert list(outputs) == [
        "/v1/output/out_0/asserted",
        "/v1/output/out_1/asserted",
        "/v1/uart/rx/enabled",
        "/v1/uart/tx/enabled",
    ]
    assert outputs["/v1/uart/rx/enabled"] is io.uart_rx_en


def test_missing_line_raises():
    with pytest.raises(LookupError, match="OUT_0"):
        DigitalOutput("/v1/output/out_0/asserted", "OUT_0", False, False, line_finder=lambda name: None)