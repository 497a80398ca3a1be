pytest_plugins = ["simpledata.testing.pytest"]
