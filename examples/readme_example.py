import asyncio
import logging
from dataclasses import dataclass

from traitcore import TraitRegistry


@dataclass(eq=False)
class Lamp:
    name: str
    color: str
    brightness: int = 0


async def main() -> None:
    logging.basicConfig(level=logging.DEBUG)
    registry = TraitRegistry()

    @registry.trait("glowing")
    def glowing(trait, lamp: Lamp) -> None:
        """Runs once per lamp, however often it is tagged."""
        lamp.brightness = 10

    red_glowing = registry.query({"tags": ["glowing"], "predicate": {"color": "red"}})
    red_glowing.track(lambda trait, lamp: print(f"{lamp.name} started glowing red"))

    porch, desk = Lamp("porch", "red"), Lamp("desk", "blue")

    # A waiter suspends until the lamp is associated
    waiter = asyncio.ensure_future(glowing.wait_for(desk, timeout=1.0))

    await glowing.associate(porch)
    registry.tags.add_tag(desk, "glowing")  # host-side tagging drives the same path
    await waiter

    print("red lamps:", [lamp.name for lamp in red_glowing.get()])
    print("brightness:", porch.brightness, desk.brightness)

    registry.retire(glowing)


if __name__ == "__main__":
    asyncio.run(main())
