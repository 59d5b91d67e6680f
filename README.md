# springkit

Building blocks for application configuration and start-up: storage for
configuration properties that checks the shape of their keys, readers for
common configuration file formats, a small expression language for
validating values, and the interfaces and helpers an application container
builds on.

## Installation

```
pip install springkit
```

The only dependency is PyYAML. TOML is read with the standard library.

## Key paths

`springkit.conf.storage.path` parses property keys. Keys are separated by
dots and list items are written in brackets: `db.hosts[0]`,
`users[1].name`.

```python
from springkit.conf.storage.path import Path, PathType, join_path, split_path

split_path("a[0].b")
# [Path(PathType.KEY, "a"), Path(PathType.INDEX, "0"), Path(PathType.KEY, "b")]
join_path(split_path("a[0].b"))  # "a[0].b"
```

`split_path` raises `ValueError("invalid key '...'")` for empty keys,
spaces, doubled or trailing dots, unbalanced brackets, non-numeric indices
and text directly after a closing bracket.

## Storage

`springkit.conf.storage.store.Storage` keeps values under flat keys and a
tree of their paths next to them. A key cannot be both a plain value and a
parent of other keys, nor both a map and a list; such a conflict raises
`ValueError("property conflict at path ...")`.

```python
from springkit.conf.storage.store import Storage

s = Storage()
s.set("a.b[0].c", "123")
s.set("m.x", "y")
s.set("m.t", "q")

s.has("a.b")          # True: a path to a value counts
s.has("a.b[0].c")     # True
s.sub_keys("m")       # ["t", "x"], sorted
s.sub_keys("missing") # []
s.raw_data()          # {"a.b[0].c": "123", "m.x": "y", "m.t": "q"}

s.set("m", "a")       # ValueError: property conflict at path m
s.set("", "v")        # ValueError: key is empty
```

`raw_data()` returns the storage's own dictionary, not a copy.

## Readers

`springkit.conf.readers` turns file contents (bytes or str) into
dictionaries:

- `read_json(b)`: a JSON object.
- `read_toml(b)`: a TOML document.
- `read_yaml(b)`: a YAML mapping. Dates and timestamps stay strings, and
  parse errors are raised as `ValueError`.
- `read_properties(b)`: a Java-style properties file, as a flat dictionary
  of strings. Comments (`#`, `!`), `=`, `:` or whitespace separators, line
  continuations and backslash escapes are handled; `${...}` references are
  left as written.

An empty JSON or YAML document gives an empty dictionary; a document that is
not a mapping raises `ValueError`.

## Validation expressions

`springkit.conf.expr` evaluates small expressions with numbers, strings,
`true`, `false`, `nil`, names, function calls, arithmetic (`+ - * / % **`),
comparisons, `in`, and `&&`/`and`, `||`/`or`, `!`/`not`. Built-in functions
are `abs`, `len`, `min`, `max`, `contains`, `hasPrefix`, `hasSuffix`,
`upper`, `lower`, `trim`, `int`, `float` and `string`.

```python
from springkit.conf.expr import evaluate, register_validate_func, validate_field

evaluate("$ > 0 && $ < 65535", {"$": 8080})  # True

register_validate_func("small", lambda i: i < 5)
validate_field("small($)", 4)   # passes
validate_field("$ >= 18", 12)   # ExprError: validate failed on "$ >= 18" for value 12
validate_field("$ + $", 4)      # ExprError: eval "$ + $" doesn't return bool value
```

In `validate_field`, `$` stands for the value and every registered
function is available by name. All failures raise `ExprError`, a subclass
of `ValueError`.

## Application pieces

`springkit.gs.core` holds the interfaces an application container works
with, as abstract classes: `Runner`, `Job`, `Server`, `ReadySignal`,
`Condition`, `CondContext`, `CondBean`, `Arg`, `ArgContext`, `BeanSelector`
and `BeanRegistration`, plus the data classes `BeanMock`, `BeanID` and
`Configuration`.

- `as_interface(t)` returns `t` if it is an abstract class and raises
  `TypeError("T must be interface")` otherwise.
- `bean_selector_for(t, name="")` returns a `BeanSelectorImpl`; its string
  form is like `{Type:io.Reader,Name:reader}`.
- `RegisteredBean` and `BeanDefinition` wrap a `BeanRegistration` and offer
  chainable setters (`name`, `init`, `destroy`, `init_method`,
  `destroy_method`, `condition`, `depends_on`, `as_runner`, `as_job`,
  `as_server`, `export`, `configuration`, `caller`, `on_profiles`) that pass
  each call on to the registration and return the builder.

`springkit.gs.signal.ReadySignal` lets a group of servers report that they
are ready before any of them starts to serve. The owner calls `add()` once
per server; each server calls `trigger_and_wait()` (or `intercept()` if it
fails) and waits on the returned `threading.Event`. The owner calls
`wait()`, checks `intercepted()`, and releases them all with `close()`.

`springkit.gs.banner` renders and prints a start-up banner in colour with the
version line centred beneath it: `render_banner(banner, version)` returns the
text, `print_banner()` prints the current banner with `VERSION`, and
`set_banner(text)` replaces it; an empty banner prints nothing.

## What the package does not do

The package stores properties and reads files, but it does not pick a reader
by file extension, merge several sources, expand `${key:=default}`
references in values, or bind properties into typed objects. It defines the
container's interfaces and bean builders, but has no container that creates
or wires beans, and no application runner that starts runners, jobs and
servers or handles shutdown signals.