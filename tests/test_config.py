from targeting.config import DEFAULT_GRID_SIZE, DEFAULT_SHIPS, load_settings, parse_grid_size, parse_ships


def test_parse_grid_size_falls_back_to_default() -> None:
    assert parse_grid_size(" 8 ") == 8
    assert parse_grid_size("0") == DEFAULT_GRID_SIZE
    assert parse_grid_size("-3") == DEFAULT_GRID_SIZE
    assert parse_grid_size("ten") == DEFAULT_GRID_SIZE
    assert parse_grid_size(None) == DEFAULT_GRID_SIZE
    assert parse_grid_size("", default=7) == 7


def test_parse_ships() -> None:
    assert parse_ships("5 1\t1") == [5, 1, 1]
    assert parse_ships("4 3 x") == list(DEFAULT_SHIPS)
    assert parse_ships("   ") == list(DEFAULT_SHIPS)
    assert parse_ships(None) == list(DEFAULT_SHIPS)


def test_load_settings_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("BATTLESHIP_GRID_SIZE", "12")
    monkeypatch.setenv("BATTLESHIP_SHIPS", "5 4 3")
    settings = load_settings()
    assert settings.grid_size == 12
    assert settings.ships == [5, 4, 3]

    monkeypatch.delenv("BATTLESHIP_GRID_SIZE")
    monkeypatch.delenv("BATTLESHIP_SHIPS")
    settings = load_settings()
    assert settings.grid_size == DEFAULT_GRID_SIZE
    assert settings.ships == list(DEFAULT_SHIPS)
