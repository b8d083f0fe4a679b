# plazza

A pizzeria simulation for the terminal. A reception reads orders from
standard input and hands each pizza to a kitchen. Each kitchen runs in its
own worker, and a fixed number of cook threads do the cooking inside it.
The reception and each kitchen exchange messages through a pair of named
pipes (FIFOs) created in the system's temporary directory. Kitchens are
opened when they are needed, and a kitchen closes itself after five seconds
with no work.

A POSIX system is required, because the package uses `os.mkfifo`.

## Installation

```
pip install .
```

## Running

```
plazza <multiplier> <cooks> <refill_ms> [console|file]
```

- `multiplier`: scales cooking times. A Margarita takes 1 s, a Regina or
  an Americana takes 2 s, and a Fantasia takes 4 s. Each time is multiplied
  by this value.
- `cooks`: the number of cook threads in each kitchen. A kitchen queues at
  most twice this many pizzas.
- `refill_ms`: how many milliseconds pass between ingredient refills. Every
  ingredient starts at 5 and goes up by one at each refill.
- The last argument is optional and picks the logger. Case does not matter.
  - `console` writes to the terminal only.
  - `file` writes to `plazza.log` in the current directory only.
  - If it is left out, messages go to both the terminal and `plazza.log`.

The three numbers must be positive integers. If an argument is invalid or
the log file cannot be opened, the command prints an error and exits with
status 84.

## Commands at the prompt

```
> regina XXL x2; margarita M x1
> status
> exit
```

Each order has the form `TYPE SIZE xN`:

- The types are `regina`, `margarita`, `americana` and `fantasia`. Case
  does not matter.
- The sizes are `S`, `M`, `L`, `XL` and `XXL`.

Separate several orders with `;`. If one order in the line is malformed,
the line is rejected with an error. Each pizza goes to the running kitchen
with the smallest estimated queue. If no kitchen can take it, a new kitchen
is opened.

`status` drops kitchens that have closed, then reports each remaining
kitchen. Each kitchen is also asked for its own status, and its reply is
shown before the next prompt. `exit`, or end of input, shuts every kitchen
down.

## Library use

```python
from plazza.parsing import parse_orders
from plazza.loggers import ConsoleLogger
from plazza.reception import Reception

orders = parse_orders("regina XXL x2;margarita M x1")

with Reception(1.0, 3, 2000, ConsoleLogger()) as reception:
    for order in orders:
        reception.handle_order(order)
    reception.print_status()
```

`Reception.run(input_stream)` reads commands from any text stream. It reads
from standard input when no stream is given.

The modules are:

- `plazza.orders`: `PizzaType`, `PizzaSize` and `PizzaOrder`.
- `plazza.parsing`: `parse_arguments`, `parse_order`, `parse_orders` and
  `ParserError`.
- `plazza.loggers`: `ConsoleLogger`, `FileLogger`, `DefaultLogger` and
  `LoggerError`.
- `plazza.ipc`: `Message`, with its `|`-separated wire format, and
  `NamedPipeChannel`, which sends length-prefixed messages over a FIFO pair
  and never blocks on reads.
- `plazza.kitchen`: `Kitchen`, a queue of pizzas cooked by cook threads
  with an ingredient stock that is refilled on a timer.
- `plazza.kitchen_process`: `KitchenProcess`, which runs a `Kitchen` in a
  worker and drives it through a `NamedPipeChannel`.
- `plazza.kitchen_wrapper`: `KitchenWrapper`, the reception's handle on a
  kitchen. It keeps an estimate of that kitchen's queue.
- `plazza.reception`: `Reception`.
- `plazza.cli`: `main`, the `plazza` command.

## Limitations

Kitchens are not separate operating-system processes. Each kitchen runs
in a worker thread of the same Python process and is reached only through
its named pipes. The PID reported for a kitchen is that worker's native
thread id.