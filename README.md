# bulletca

A headless simulation toolkit built around two small game ideas.

* **A cellular-automata bullet playground.** Bullets live on a grid. Each
  bullet carries its own copy of a rule set made of 3×3 patterns. A pattern
  has a *precedent* (condition) and a *consequent* (result). When a
  precedent matches the area around a bullet, the consequent creates new
  bullets on empty cells or kills bullets on live ones. Bullets age, fade
  out and leave a per-chain death cooldown on the cells where they died. A
  chain is a bullet together with its descendants.
* **A mob-gathering sandbox.** Individuals cluster into mobs. Mobs drift
  towards targets, are pulled towards larger neighbours and absorb smaller
  ones. Villages produce new individuals while nearby food lasts. These
  parts talk to each other through a simple event bus.

The package holds the state, the rules and the update steps. It draws
nothing, so you can drive it from tests, scripts or any front end you like.

## Requirements

Python 3.10 or newer. There are no third-party runtime dependencies.

## Modules

| Module                 | What it holds                                                          |
|------------------------|------------------------------------------------------------------------|
| `bulletca.types`       | `CellState` (`EMPTY`, `ALIVE`, `ANY`) and `Pattern3x3`                 |
| `bulletca.bullet`      | `Bullet`, `new_bullet_id`, `new_chain_id`, `new_chain_bullet`          |
| `bulletca.grid`        | `Grid`, `Cell` and the per-chain `DeathInfo` record                    |
| `bulletca.rules`       | `ActionType`, `Action`, the abstract `Rule`, `BasicRule`, `RuleSet`    |
| `bulletca.performance` | `ObjectPool`, `SpatialIndex`, `BulletManager`                          |
| `bulletca.simulation`  | `SimulationEngine`, `RuleRegistry`, `SimulationStats`                  |
| `bulletca.editor`      | `RuleEditor` and the `EditorKey` enum                                  |
| `bulletca.playground`  | `Playground`, which joins the engine and the editor to key/click input |
| `bulletca.events`      | `Bus` and the events `EventMerge`, `EventProduce`, `EventResourceSpawn`, `EventResourceDepleted` |
| `bulletca.entities`    | `Participant`, `Individual`, `Structure`, `Resource`                   |
| `bulletca.mob`         | `Mob`                                                                  |
| `bulletca.world`       | `World` and its food-spawning `Director`                               |

## A first automaton

```python
from bulletca.types import CellState, Pattern3x3
from bulletca.rules import BasicRule, RuleSet
from bulletca.simulation import SimulationEngine

A, E, X = CellState.ALIVE, CellState.EMPTY, CellState.ANY

# A live centre dies and fires bullets into the four corners.
burst = Pattern3x3(
    condition=((X, X, X), (X, A, X), (X, X, X)),
    result=((A, X, A), (X, E, X), (A, X, A)),
)

rule = BasicRule("Burst")
rule.add_pattern(burst)

rules = RuleSet("Custom")
rules.add_rule(rule)

engine = SimulationEngine(100, 100)
engine.add_bullet(50, 50, rules)

for _ in range(10):
    engine.update()

print(engine.stats())
```

`SimulationEngine.update` always counts a frame. Unless `engine.paused` is
set, it also runs one step, which does four things in this order:

1. It ages every bullet and drops the ones that have died.
2. It removes dead bullets from the grid and marks a death cooldown on
   their cells.
3. It applies the rules of every living bullet that is still within its
   functional lifetime. Bullets that are fading out take no part.
4. It carries out the queued create and kill actions.

`engine.max_actions_per_frame` caps how many actions are queued per step.
The default is 2000, and `-1` removes the cap.

A bullet created by a rule inherits its parent's chain. Its lifetime is the
parent's remaining lifetime minus one, and never less than one. A bullet
lives past its lifetime for a fade-out period of a quarter of that lifetime,
and at least 10 steps. `Bullet.opacity()` falls linearly from 1 to 0 during
that period. When a bullet dies, its cell refuses new bullets from the same
chain for the fade-out period times `engine.death_cooldown_multiplier`.
Bullets from other chains can still land there.

## Editing rules interactively

`RuleEditor` keeps a custom rule whose first pattern is the burst above,
with a default lifetime of 30 steps. It reacts to `EditorKey` values through
`handle_key(key, cursor)` and to screen clicks through
`handle_click(x, y)`. A click cycles a pattern cell through Empty, Alive and
Any. After every input, the editor registers its rule set as `"custom"` in
the engine's `rule_registry`. `status_lines()` returns the text of the
editor panel.

`Playground` wraps a 100×100 engine and an editor. It takes key names:
single characters such as `"e"`, `"c"`, `"["`, `"1"`, or one of
`"space"`, `"delete"`, `"backspace"`, `"left"` and `"right"`. Clicks are
given as screen coordinates, at 6 pixels per grid cell.

```python
from bulletca.playground import Playground

pg = Playground()
pg.handle_key("space")       # test bullet in the centre, with the editor's rules
pg.handle_click(120, 90)     # another bullet at grid cell (20, 15)
for _ in range(30):
    pg.update()
print("\n".join(pg.stats_lines()))
```

`"e"` toggles the editor and `"d"` toggles the debug lines. With the editor
hidden, `"p"` pauses the simulation, and `"-"` and `"="` change the death
cooldown multiplier between 0 and 3. `Playground.bullet_color(bullet)`
gives the RGBA colour a renderer would use: redder with age, with alpha
following the opacity. `ticks_per_second` is a setting that `"["` and `"]"`
change and `stats_lines()` shows. `Playground.update` does not use it and
advances exactly one frame per call.

## The mob sandbox

```python
from bulletca.world import World

world = World()
for _ in range(600):
    world.update()

for mob in world.mobs:
    print(mob.label, mob.radius(), len(mob.individuals()))
```

A new `World` holds one mob of 2000 individuals at (300, 300) and one food
resource. The first mob is the player's. Set its `target_x` and `target_y`
to steer it.

`World.update` does the following, in order:

1. It advances the `Director`, which publishes a food-spawn event every 600
   to 1199 ticks while there are fewer than four resources.
2. It advances every mob and every village.
3. It delivers the events on the bus.

`World.found_village(mobile)` spends ten individuals of the first mob, which
must have more than ten. With `mobile=False` it places a fixed village in the
world, which produces every 240 ticks. With `mobile=True` the village joins
the mob and produces every 480 ticks. Only fixed villages in
`world.structures` are advanced by the world.

Each production needs food within 200 units of the village. A successful
production consumes one unit of food and starts a new one-member mob. A
village that fails more than five times in a row stops producing. Pass a
`random.Random` to `World(rng=...)` for repeatable food spawns. Progress is
reported through the `logging` module under `bulletca.world`.

## What it does not do

The package has no window, no drawing, no sound or image assets and no
event loop. Nothing here reads a keyboard or mouse. You feed keys and
clicks to `Playground` and `RuleEditor` yourself, and read the state back
to render it. There is no command-line program.

## Running the tests

Install the `test` extra and run `pytest` from the project root.