from typing import List
from machine_seed.core.ecs import EntityManager, Entity
from machine_seed.components.data_components import (BotComponent, InZoneComponent,
                                                     MovementComponent, PositionComponent)
from machine_seed.components.tags import IsBot, IsHomeBase
from machine_seed.world.grid import Grid, TILE_STOCKPILE
from machine_seed.utils.logger import Logger

def spawn_home_base(entity_manager: EntityManager, grid: Grid, x: int, y: int) -> Entity:
    """Home base (AI core). Its tile is forced to stockpile so bots can stand on it."""
    if grid.get_tile(x, y) != TILE_STOCKPILE:
        grid.set_tile(x, y, TILE_STOCKPILE)
    base = entity_manager.create_entity()
    entity_manager.add_component(base, PositionComponent(x, y))
    entity_manager.add_component(base, IsHomeBase())
    Logger.info(f"Spawned home base at ({x}, {y})")
    return base

def spawn_bot(entity_manager: EntityManager, x: int, y: int, speed: float = 1.0) -> Entity:
    bot = entity_manager.create_entity()
    entity_manager.add_component(bot, PositionComponent(x, y))
    entity_manager.add_component(bot, MovementComponent(speed=speed))
    entity_manager.add_component(bot, BotComponent())
    entity_manager.add_component(bot, InZoneComponent())
    entity_manager.add_component(bot, IsBot())
    return bot

def spawn_initial_bots(entity_manager: EntityManager, grid: Grid, home_x: int, home_y: int,
                       count: int = 2, speed: float = 1.0) -> List[Entity]:
    """Bots alternate left and right of the base, two tiles further out per pair."""
    bots = []
    for i in range(count):
        offset = 2 * (i // 2 + 1) * (1 if i % 2 == 0 else -1)
        bx = min(max(home_x + offset, 0), grid.width - 1)
        bots.append(spawn_bot(entity_manager, bx, home_y, speed))
        Logger.info(f"Created Bot {i+1} at ({bx}, {home_y})")
    return bots
