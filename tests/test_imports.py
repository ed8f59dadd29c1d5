"""Verify every module imports cleanly with no errors."""


def test_import_moth():
    import moth  # noqa: F401


def test_import_cli():
    import moth.cli  # noqa: F401


def test_import_commands():
    import moth.commands  # noqa: F401


def test_import_config():
    import moth.config  # noqa: F401


def test_import_defaults():
    import moth.defaults  # noqa: F401


def test_import_fs():
    import moth.fs  # noqa: F401


def test_import_hooks():
    import moth.hooks  # noqa: F401


def test_import_issue():
    import moth.issue  # noqa: F401


def test_import_output():
    import moth.output  # noqa: F401


def test_import_store():
    import moth.store  # noqa: F401


def test_import_git():
    import moth.git.hook  # noqa: F401
    import moth.git.prefix  # noqa: F401
    import moth.git.report  # noqa: F401
