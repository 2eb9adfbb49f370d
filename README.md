# cukewire

`cukewire` lets Cucumber drive step definitions written in Python over the
Cucumber *wire protocol*. Cucumber sends JSON requests over a TCP or Unix
socket, one request per line. The server decodes each request, runs it
against an engine and writes back the JSON reply.

## What is inside

- `cukewire.regex`: `Regex`, which does regular-expression matching.
  `find` and `find_all` return a `RegexMatch` whose `submatches` carry each
  captured group's text and code-point position.
- `cukewire.tags`: tag expressions for hooks (`OrTagExpression`,
  `AndTagExpression`) and `Scenario`, which carries a scenario's tags.
- `cukewire.table`: `Table`, a data table whose rows are exposed as
  column-to-value mappings.
- `cukewire.context`: `ContextManager` and `ScenarioScope`, which hold
  per-scenario state.
- `cukewire.steps`: step registration and matching (`StepManager`,
  `StepInfo`, `MatchResult`), step arguments (`InvokeArgs`), step bodies
  (`BasicStep`, `GenericStep`) and results (`InvokeResult`).
- `cukewire.hooks`: before, around-step, after-step, after, before-all and
  after-all hooks, run by `HookRegistrar` and `StepCallChain`.
- `cukewire.engine`: the `CukeEngine` interface and the exceptions that
  `invoke_step` raises.
- `cukewire.commands`, `cukewire.protocol`, `cukewire.server`: wire commands
  and responses, the JSON codec (`JsonWireMessageCodec`), the request
  handler (`WireProtocolHandler`) and the socket servers (`TCPSocketServer`,
  `UnixSocketServer`).

## Tag expressions

```python
from cukewire.tags import AndTagExpression, OrTagExpression

OrTagExpression("@a,@b").matches(["b"])   # True

expr = AndTagExpression('"@a,@b", "@c"')
expr.matches(["a", "c"])   # True
expr.matches(["b"])        # False
```

An empty `AndTagExpression("")` matches every scenario. An empty
`OrTagExpression("")` matches none.

## Tables

```python
from cukewire.table import Table

table = Table()
table.add_column("name")
table.add_column("age")
table.add_row(["Ann", "31"])
table.hashes()   # [{"name": "Ann", "age": "31"}]
```

Adding a column once a row exists raises `RuntimeError`. So does adding a row
before any column is defined. A row whose length differs from the number of
columns raises `RowSizeError`.

## Steps

A step is a subclass of `GenericStep` with a `body`. Inside the body,
`regex_param(kind)` returns the next captured argument converted to `kind`,
and `pending(description)` marks the step as pending. If the body raises an
exception, the result is a failure that carries the exception's message.

```python
from cukewire.steps import GenericStep, InvokeArgs, StepInfo, StepManager


class AddStep(GenericStep):
    def body(self):
        a = self.regex_param(int)
        b = self.regex_param(int)
        assert a + b == 5, "wrong sum"


manager = StepManager()
manager.add_step(StepInfo(r"I add (\d+) and (\d+)", "calc.py:10", AddStep))

match = next(iter(manager.step_matches("I add 2 and 3")))
args = InvokeArgs([s.value for s in match.submatches])
match.step_info.invoke_step(args).is_success()   # True
```

## Hooks

```python
from cukewire.hooks import BeforeHook, HookRegistrar
from cukewire.tags import Scenario


class OpenDatabase(BeforeHook):
    def body(self):
        print("opening database")


hook = OpenDatabase()
hook.set_tags('"@db"')
registrar = HookRegistrar()
registrar.add_before_hook(hook)
registrar.exec_before_hooks(Scenario(["db"]))   # runs the hook
```

Around-step hooks get the rest of the chain as `self.step`. They call
`self.step.call()` to run the step. `exec_step_chain` runs the around-step
hooks in registration order, with the step innermost. After-step, after and
after-all hooks run in the reverse order of registration.

## Serving the wire protocol

Implement the five `CukeEngine` methods. To report a pending or failing step,
raise `PendingStepException` or `InvokeFailureException` from `invoke_step`.
Then put the engine behind a protocol handler and a socket server:

```python
from cukewire.engine import CukeEngine, PendingStepException
from cukewire.protocol import JsonWireMessageCodec, WireProtocolHandler
from cukewire.server import TCPSocketServer


class MyEngine(CukeEngine):
    def step_matches(self, name):
        return []

    def begin_scenario(self, tags):
        pass

    def invoke_step(self, step_id, args, table_arg):
        raise PendingStepException("not written yet")

    def end_scenario(self, tags):
        pass

    def snippet_text(self, keyword, name, multiline_arg_class):
        return ""


handler = WireProtocolHandler(JsonWireMessageCodec(), MyEngine())
with TCPSocketServer(handler) as server:
    server.listen("127.0.0.1", 3902)
    print("Listening on", server.listen_endpoint())
    server.accept_once()
```

`accept_once` serves a single connection until Cucumber closes it. Port `0`
picks a free port; `listen_endpoint()` then reports the port that was chosen.
On systems with Unix sockets, `UnixSocketServer.listen(path)` does the same
job on a socket path and removes the socket file when the server closes.

Each request line gets exactly one reply line. A request that cannot be
decoded, or a command that fails, gets `["fail"]`:

```python
handler.handle('["begin_scenario"]')   # '["success"]'
handler.handle("rubbish")              # '["fail"]'
```

## What this package does not do

- There is no command-line program. To start a server, call `listen` and
  `accept_once` from your own code.
- There is no ready-made `CukeEngine`. You write the engine yourself and
  connect it to `StepManager`, `HookRegistrar` and `ContextManager`. That
  engine is also where snippet text for undefined steps comes from; the
  package does not generate it.
- There are no decorators that register steps or hooks. You add them by
  creating `StepInfo` objects and hook instances and passing them to a
  `StepManager` or `HookRegistrar`.