import pytest

from kaboul.battle import (
    BARRIER_SPEED,
    DEATH_FRAMES,
    ENEMY_MAX_HEALTH,
    ENEMY_STEP,
    HURT_MS,
    MAX_OBSTACLES,
    MINIMAP_POS,
    MOVE_FRAMES,
    OBSTACLE_RECTS,
    PLAYER_BASE_Y,
    Barrier,
    Battle,
    Enemy,
    minimap_point,
    push_out_of_barrier,
)


class _Rng:
    def __init__(self, value):
        self.value = value

    def randrange(self, n):
        return self.value


NEVER_TURN = _Rng(50)
ALWAYS_TURN = _Rng(0)


@pytest.fixture
def battle():
    return Battle(
        field_width=1200,
        field_height=900,
        player_size=(40, 60),
        enemy_size=(50, 80),
        barrier=Barrier(600, 0, 20, 200),
    )


def test_barrier_moves_by_speed():
    barrier = Barrier(600, 10, 20, 200)
    barrier.step(900)
    assert barrier.y == 10 + BARRIER_SPEED
    assert barrier.direction == 1


def test_barrier_bounces_at_top():
    barrier = Barrier(600, 1, 20, 200, direction=-1)
    barrier.step(900)
    assert barrier.y == 0
    assert barrier.direction == 1


def test_barrier_bounces_at_bottom():
    barrier = Barrier(600, 699, 20, 200)
    barrier.step(900)
    assert barrier.y == 900 - 200
    assert barrier.direction == -1


def test_push_out_to_the_left():
    assert push_out_of_barrier((570, 0, 40, 60), (600, 0, 20, 200)) == 600 - 40


def test_push_out_to_the_right():
    assert push_out_of_barrier((605, 0, 40, 60), (600, 0, 20, 200)) == 600 + 20


def test_push_out_without_collision_keeps_x():
    assert push_out_of_barrier((100, 0, 40, 60), (600, 0, 20, 200)) == 100


def test_minimap_point_origin_is_minimap_corner():
    assert minimap_point((0, 0), 0.5, 0.5) == MINIMAP_POS


def test_minimap_point_scales():
    x, y = minimap_point((100, 200), 0.5, 0.25)
    assert (x - MINIMAP_POS[0], y - MINIMAP_POS[1]) == (50, 50)


def test_initial_layout(battle):
    assert battle.player_x == 600 - 20
    assert battle.player_y == PLAYER_BASE_Y - 60
    assert [(e.x, e.direction) for e in battle.enemies] == [(100, 1), (300, -1)]
    assert all(e.y == PLAYER_BASE_Y - 80 for e in battle.enemies)
    assert battle.obstacle_active == [True] * MAX_OBSTACLES


def test_move_player(battle):
    start = battle.player_x
    battle.move_player(-4)
    battle.move_player(-4)
    assert battle.player_x == start - 8


def test_attack_hits_touching_enemy(battle):
    battle.player_x = battle.enemies[0].x
    hit = battle.attack(1000)
    enemy = battle.enemies[0]
    assert hit == [0]
    assert enemy.health == ENEMY_MAX_HEALTH - 1
    assert enemy.hurt
    assert enemy.hurt_until == 1000 + HURT_MS
    assert battle.enemies[1].health == ENEMY_MAX_HEALTH


def test_attack_misses_far_enemies(battle):
    assert battle.attack(0) == []
    assert all(e.health == ENEMY_MAX_HEALTH for e in battle.enemies)


def test_enemy_dies_and_is_not_hit_again(battle):
    battle.player_x = battle.enemies[0].x
    battle.enemies[0].health = 1
    battle.attack(0)
    battle.step(NEVER_TURN, 0)
    assert battle.enemies[0].dying
    assert battle.enemies[0].health == 0
    battle.player_x = battle.enemies[0].x
    assert 0 not in battle.attack(10)


def test_dying_enemy_plays_death_animation_then_vanishes(battle):
    enemy = battle.enemies[0]
    enemy.dying = True
    enemy.health = 0
    poses = []
    for _ in range(DEATH_FRAMES * 6 + 1):
        battle.step(NEVER_TURN, 0)
        poses.append(enemy.pose)
    assert poses[0] == ("death", 0)
    assert poses[-2] == ("death", DEATH_FRAMES - 1)
    assert poses[-1] is None


def test_hurt_expires_after_deadline(battle):
    enemy = battle.enemies[0]
    enemy.hurt = True
    enemy.hurt_until = 500
    battle.step(NEVER_TURN, 400)
    assert enemy.hurt and enemy.pose == ("hurt", 0)
    battle.step(NEVER_TURN, 501)
    assert not enemy.hurt


def test_obstacle_is_collected(battle):
    ox, oy, _, _ = OBSTACLE_RECTS[1]
    battle.player_x = ox + 10
    battle.player_y = oy - 20
    battle.step(NEVER_TURN, 0)
    assert battle.obstacle_active[1] is False
    assert battle.obstacle_active[0] is True


def test_enemy_patrols(battle):
    battle.step(NEVER_TURN, 0)
    assert battle.enemies[0].x == 100 + ENEMY_STEP
    assert battle.enemies[1].x == 300 - ENEMY_STEP
    assert battle.enemies[0].pose[0] == "idle"


def test_enemy_turns_at_left_edge(battle):
    enemy = battle.enemies[0]
    enemy.x = 0
    enemy.direction = -1
    battle.step(NEVER_TURN, 0)
    assert enemy.direction == 1


def test_enemy_turn_animation(battle):
    enemy = battle.enemies[0]
    battle.step(ALWAYS_TURN, 0)
    assert enemy.direction == -1
    assert enemy.x == 100
    assert enemy.pose == ("move", 0)
    for _ in range(MOVE_FRAMES - 1):
        battle.step(NEVER_TURN, 0)
    assert not enemy.turning


def test_enemy_bounces_off_barrier(battle):
    enemy = Enemy(x=560, y=100, direction=1)
    battle.enemies = [enemy]
    battle.step(NEVER_TURN, 0)
    assert enemy.direction == -1
    assert enemy.x < 560


def test_player_pushed_by_barrier(battle):
    battle.barrier = Barrier(600, 700, 20, 200, direction=1)
    battle.player_x = 585
    battle.step(NEVER_TURN, 0)
    assert battle.player_x == 600 - 40


def test_animation_frame_advances(battle):
    for _ in range(5):
        battle.step(NEVER_TURN, 0)
    assert battle.anim_frame == 1
    assert battle.anim_delay == 0