[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kaboul"
version = "0.1.0"
description = "A small pygame arcade game: title menu, lobby, options screen, timed brawler with a score board, and a battle stage with save games"
requires-python = ">=3.10"
keywords = ["game", "pygame", "arcade", "side-scroller", "menu"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Intended Audience :: End Users/Desktop",
    "Topic :: Games/Entertainment",
    "Topic :: Games/Entertainment :: Side-Scrolling/Arcade Games",
]
dependencies = ["pygame"]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
kaboul = "kaboul.launcher:main"
kaboul-arena = "kaboul.arena:main"
kaboul-options = "kaboul.options:main"
kaboul-lobby = "kaboul.lobby:main"
kaboul-battle = "kaboul.battle:main"
kaboul-savegame = "kaboul.savegame:main"

[tool.hatch.build.targets.wheel]
packages = ["kaboul"]

[tool.pytest.ini_options]
addopts = "-ra"
