# dexedfm

Building blocks for a DX7-style FM synthesizer, in pure Python with no
dependencies beyond the standard library.

## Modules

- `dexedfm.engine_mki`: the "Mark I" operator engine. It builds
  1024-entry log-sine and exponent tables. It provides `sin_log` and
  `mki_sin`, and the `EngineMkI` class with `compute`, `compute_pure`,
  `compute_fb`, `compute_fb2` and `compute_fb3`. The last two render feedback
  loops over two and three operators, described by `OpParams`.
- `dexedfm.engine_opl`: an OPL-style operator engine with 256-entry
  log-sine and exponent tables. It provides `sin_log` and `opl_sin`, and the
  `EngineOpl` class with `compute`, `compute_pure` and `compute_fb`.
- `dexedfm.algo_layout`: the schematic layout of the 32 six-operator
  algorithms. It has these parts:
  - `algorithm_layout` gives the `OperatorPlacement`s of an algorithm.
  - `operator_origin` and `operator_segments` give pixel positions and line
    `Segment`s.
  - `render_algorithm` returns `DrawnOperator`s. Each one is marked enabled or
    disabled from an operator status string, in which operator 6 comes first.
- `dexedfm.envelope`: envelope timing and geometry for the editor widgets.
  - `envelope_duration` gives the length of an envelope stage.
  - `envelope_shape` gives an `EnvelopeShape` with vertices, an outline and
    stage markers.
  - `vu_meter_width` gives the lit width of the level meter.
  - `ProgramSelector` selects among 32 programs. The arrows and the wheel wrap
    around at the ends.
  - `LcdDisplay` holds the one-line message.
- `dexedfm.theme`: colours and image overrides.
  - `Colour` and `parse_colour` read hexadecimal ARGB values.
  - `find_image` checks image paths.
  - `Theme` holds the built-in colours. `Theme.apply_xml` and `Theme.load`
    apply a `DexedTheme.xml` file.

The engines work on Python lists of integers. They wrap values to 32 bits, as
fixed-point code does. The block size must be a power of two.

## Installation

```
pip install .
```

Install `.[test]` to get pytest as well.

## Example

```python
from dexedfm.engine_mki import EngineMkI
from dexedfm.algo_layout import algorithm_layout, render_algorithm
from dexedfm.envelope import envelope_duration, ProgramSelector
from dexedfm.theme import Theme, parse_colour

engine = EngineMkI(block_size=64)
out = [0] * 64
engine.compute_pure(out, 0, 1 << 20, 0, 0, False)

layout = algorithm_layout(0)           # algorithm 1, zero-based
drawn = render_algorithm(0, "111111")  # every operator switched on

seconds = envelope_duration(99, 0, 99)

selector = ProgramSelector(index=0)
selector.select_previous()             # wraps round to program 31

colour = parse_colour("0xFF4D9F97")
theme = Theme.load("DexedTheme.xml")   # built-in theme if the file is missing
```

## What it does not do

This package is a set of components, not a complete synthesizer:

- It has no voice or algorithm router that chains the six operators of an
  algorithm into a finished sound.
- It has no audio output and no MIDI input.
- It cannot load, save or send cartridges or programs.
- It has no graphical editor. The layout and envelope modules compute
  coordinates, and drawing is left to whatever toolkit you use.
- It provides no command-line program.

## Tests

```
pytest
```