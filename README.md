# boblight

Building blocks for software that drives ambient lights from what is on
screen: per-light color processing on the capturing side, color mixing on the
light side, a line-based message queue, fixed-interval timers, stoppable
worker threads, non-blocking TCP sockets, raw serial ports and a rotating log.

The package has no dependencies outside the standard library. The serial port
module uses `termios`, so it needs a POSIX system.

## Installing

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## What it does not do

The package holds the pieces, not a finished program. It has no client that
connects to a light server and speaks its protocol, no server that accepts
such clients, no drivers for particular light hardware, and no command to
run. Those have to be built on top of the modules below.

## Turning pixels into a light color

`boblight.clientlight.ClientLight` averages the pixels it is given and turns
them into a color between 0 and 1, applying threshold, gamma, saturation and
value settings on the way.

```python
from boblight.clientlight import ClientLight, OptionError, option_descriptions

light = ClientLight(name="left")
light.set_option("saturation 1.5")   # returns True when the change concerns the server
light.set_option("threshold 20")
print(light.get_option("saturation"))   # "1.5"

for _ in range(16):
    light.add_pixel((255, 128, 0))
red, green, blue = light.get_rgb()   # resets the running average

try:
    light.set_option("speed fast")
except OptionError as exc:
    print(exc)   # invalid value fast for option speed with type float

for line in option_descriptions():
    print(line)
```

The options are `speed`, `autospeed`, `interpolation`, `use`, `saturation`,
`saturationmin`, `saturationmax`, `value`, `valuemin`, `valuemax`,
`threshold`, `gamma`, `hscanstart`, `hscanend`, `vscanstart` and `vscanend`.
The scan options are percentages of the picture; `set_scan_range(width,
height)` scales them to pixel coordinates in `hscanscaled` and `vscanscaled`.
A scan start is limited to the current scan end, so set the end first.

## Mixing output colors

`boblight.light.Light` keeps the last two colors written to a light and works
out how strongly each of its output channels (`Color`) has to be driven.

```python
from boblight.light import Color, Light

light = Light(name="left")
light.add_color(Color(name="red", rgb=(1.0, 0.0, 0.0)))
light.add_color(Color(name="green", rgb=(0.0, 1.0, 0.0)))
light.add_color(Color(name="blue", rgb=(0.0, 0.0, 1.0)))

light.set_rgb((1.0, 0.0, 0.0), time=1_000)
print(light.get_color_value(0, time=1_000))   # 1.0
```

With `interpolation` on, `get_color_value` blends between the previous and
the last color according to the time given, and returns 0 until two colors
have been written. A light also tracks the devices using it (`add_user`,
`clear_user`, `users`) and a one-off change amount per device
(`set_single_change`, `get_single_change`, `reset_single_change`).

## Other modules

- `boblight.messagequeue` – `MessageQueue` splits received data into
  newline-terminated `Message` objects stamped with their arrival time:
  `add_data(b"hello\nver")` queues `"hello"` and keeps `"ver"` as a partial
  line (`remaining_data_size()` is 3). `len(queue)` counts complete messages.
- `boblight.tcpsocket` – `TcpClientSocket` and `TcpServerSocket`, non-blocking
  sockets with timeouts in microseconds. `read()` returns the bytes currently
  available, `write()` sends everything, and failures raise `SocketError` or
  `SocketTimeout`. Opening a server on port 0 picks a free port, found in
  `port` afterwards.
- `boblight.serialport` – `SerialPort` opens a port in raw, non-blocking mode
  with a given baudrate, data bits, stop bits and `Parity`. `read(size, usecs)`
  reads exactly `size` bytes or raises `SerialPortError` on timeout.
  Configuration problems that leave the port usable are kept in `error`.
  `int_to_rate()` maps a baudrate to its `termios` speed constant.
- `boblight.timer` – `Timer` returns from `wait()` once per interval set with
  `set_interval(usecs)`; `SignalTimer` can be woken early with `signal()`.
  Both take an optional `threading.Event` that ends long waits.
- `boblight.worker` – `Worker` runs `process()` on a background thread; a
  subclass watches `stop_event`, and `stop_thread()` asks it to stop and
  waits.
- `boblight.log` – `LogWriter` writes lines tagged with the calling function
  to standard error and to a log file under `~/.boblight/`, keeping five
  older files as `<name>.old.1` to `<name>.old.5`. Lines logged before the
  file is opened are written once it is.
- `boblight.misc` – word splitting (`get_word`), C-style number parsing
  (`str_to_int`, `hex_str_to_int`, `str_to_float`), `str_to_bool`, `clamp`
  and `round32`.
- `boblight.timeutils` – `get_time_us()`, `get_time_sec()` and `usleep()`, a
  sleep that an event can cut short.