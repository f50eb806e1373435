import pytest

from kaboul.battle import Barrier, Battle
from kaboul.savegame import (
    RECORD_SIZE,
    GameState,
    load_game_state,
    save_game_state,
)


def make_battle():
    return Battle(
        field_width=1000,
        field_height=900,
        player_size=(50, 60),
        enemy_size=(40, 50),
        barrier=Barrier(600, 0, 20, 100),
    )


def sample_state():
    return GameState(
        player=(475, 760, 50, 60),
        enemies=((100, 770, 40, 50), (300, 770, 40, 50)),
        enemy_health=(6, 3),
        dying=(False, True),
        obstacle_active=(True, False, True),
        barrier=(600, 42, 20, 100),
        barrier_direction=-1,
    )


def test_record_size_matches_layout():
    assert RECORD_SIZE == 52
    assert len(sample_state().to_bytes()) == RECORD_SIZE


def test_bytes_round_trip():
    state = sample_state()
    assert GameState.from_bytes(state.to_bytes()) == state


def test_encoding_pins_little_endian_fields():
    data = sample_state().to_bytes()
    assert data[:2] == (475).to_bytes(2, "little")
    assert data[-4:] == b"\xff\xff\xff\xff"


def test_from_bytes_rejects_wrong_length():
    with pytest.raises(ValueError):
        GameState.from_bytes(b"\x00" * (RECORD_SIZE - 1))


def test_wrong_field_count_rejected():
    with pytest.raises(ValueError):
        GameState(
            player=(0, 0, 1, 1),
            enemies=((0, 0, 1, 1),),
            enemy_health=(6, 6),
            dying=(False, False),
            obstacle_active=(True, True, True),
            barrier=(0, 0, 1, 1),
            barrier_direction=1,
        )


def test_out_of_range_position_rejected():
    state = GameState(
        player=(70000, 0, 1, 1),
        enemies=((0, 0, 1, 1), (0, 0, 1, 1)),
        enemy_health=(6, 6),
        dying=(False, False),
        obstacle_active=(True, True, True),
        barrier=(0, 0, 1, 1),
        barrier_direction=1,
    )
    with pytest.raises(ValueError):
        state.to_bytes()


def test_capture_reflects_battle():
    battle = make_battle()
    battle.move_player(-8)
    state = GameState.capture(battle)
    assert state.player == battle.player_rect
    assert state.barrier == battle.barrier.rect
    assert state.enemy_health == tuple(e.health for e in battle.enemies)


def test_restore_after_capture_recovers_battle():
    original = make_battle()
    original.move_player(12)
    original.enemies[1].health = 2
    original.enemies[0].dying = True
    original.obstacle_active[1] = False
    original.barrier.step(original.field_height)
    state = GameState.capture(original)

    fresh = make_battle()
    state.restore(fresh)
    assert GameState.capture(fresh) == state
    assert fresh.player_x == original.player_x


def test_save_and_load_file(tmp_path):
    path = tmp_path / "saved_game.dat"
    state = sample_state()
    save_game_state(state, path)
    assert path.stat().st_size == RECORD_SIZE
    assert load_game_state(path) == state


def test_load_missing_file_returns_none(tmp_path):
    assert load_game_state(tmp_path / "absent.dat") is None


def test_load_truncated_file_raises(tmp_path):
    path = tmp_path / "saved_game.dat"
    path.write_bytes(sample_state().to_bytes()[:10])
    with pytest.raises(ValueError):
        load_game_state(path)