"""brick-orm test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of a single module/class/function.
- integration/  : Real interactions with a database file or server and the filesystem.
- functional/   : The ``brick-orm`` CLI exercised end-to-end through CliRunner.
- contract/     : DatabaseContext behaviour every backend database must honour.
- fixtures/     : Shared fixtures, test entities and their migration scripts (no tests here).

General guidance
- Keep unit fast and deterministic; an in-memory SQLite engine is fine, a server is not.
- Integration hits real dependencies with realistic setup/teardown.
- Functional asserts user-observable results, not internals.
- Contract parametrizes databases to ensure consistent behavior.
- Property-based tests live with the layer they exercise and use @pytest.mark.property.
- Markers: unit, integration, functional, contract, property, slow
"""
