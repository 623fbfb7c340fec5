# dbforge

dbforge is a library of building blocks for random SQL test data. It has three
parts:

- an SQL value model (`dbforge.number`, `dbforge.value`). Values are Python
  objects: `None` stands for NULL, `Number` holds a boolean, an integer or a
  finite float, `bytes` holds a string, and there are also `Timestamp`,
  `Interval` and tuples for arrays. The operations follow SQL rules.
  Comparing with NULL gives `None`, dividing by zero gives NULL, and
  overflow raises `IntegerOverflowError`.
- SQL functions (`dbforge.functions`). These cover arithmetic, comparison
  and logic (`ops`), strings (`string`), arrays (`array`), hex and base64
  (`codec`), timestamps (`time`) and `debug.panic` (`debug`). Each function
  has a `compile(ctx, span, args)` method. It takes spanned arguments and
  returns the resulting value. `dbforge.registry` looks functions up by name
  (`function_from_name`) or by operator (`function_from_operator`).
- helpers. `dbforge.span` holds the spans and the error types, and
  `SpanRegistry.describe` renders an error together with its location in the
  text. `dbforge.literals` parses number literals and interval units.
  `dbforge.lexctr.LexCtr` is a counter whose string forms sort in counting
  order.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Examples

```python
from dbforge.number import Number
from dbforge.value import sql_add, format_value

total = sql_add(Number(3), Number(4))
print(format_value(total))  # 7
```

Calling a function by its name:

```python
from dbforge.functions.base import CompileContext
from dbforge.number import Number
from dbforge.registry import function_from_name
from dbforge.span import Span, Spanned

coalesce = function_from_name("coalesce")
result = coalesce.compile(CompileContext(), Span(), [Spanned(None), Spanned(Number(1))])
print(result)  # 1
```

Literals and the lexicographic counter:

```python
from dbforge.literals import parse_number, interval_unit
from dbforge.lexctr import LexCtr

print(parse_number("0x10"))    # 16
print(interval_unit("SECOND")) # 1000000

counter = LexCtr()
print(counter)                 # 000
counter.inc()
print(counter)                 # 001
```

## What it does not do

dbforge does not parse templates and has no command-line program. It does
not handle schema-qualified table names, and it does not generate random
schemas. It has no random-value functions: `function_from_name` knows only
the functions listed in `dbforge.registry`. It also writes no files or
INSERT statements. Evaluating expressions and writing rows are left to the
code that uses this library.