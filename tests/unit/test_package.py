import dialectkit


def test_public_api() -> None:
    assert isinstance(dialectkit.__version__, str)
    for name in dialectkit.__all__:
        assert hasattr(dialectkit, name)


def test_end_to_end_sqlite() -> None:
    registry = dialectkit.DriverRegistry()
    driver = registry.require("sqlite")
    statements = [token.sql for token in driver.split("SELECT 1; SELECT 'a;b'; SELECT 3")]
    assert statements == ["SELECT 1", "SELECT 'a;b'", "SELECT 3"]
    assert driver.get_splitter_options("stream").no_split
