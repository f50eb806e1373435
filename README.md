# kaboul

A small arcade game built with pygame. It is made of several screens, each
started by its own command: a title menu, a lobby for choosing a mode and an
avatar, an options screen for music volume and display mode, a timed
two-level brawler with a score board, and a battle stage whose progress can
be saved.

## Installing

```
pip install .
```

To run the tests as well:

```
pip install .[test]
pytest
```

## Running

Every command takes `--root DIR`, the directory that holds the images,
music and fonts (default: the current directory). Assets are looked up
relative to that directory.

| Command           | What it starts                                                       |
|-------------------|----------------------------------------------------------------------|
| `kaboul`          | Title menu: play, options, story and quit, with a loading screen     |
| `kaboul-lobby`    | Mode and avatar selection                                            |
| `kaboul-battle`   | Battle stage with two enemies, obstacles, a moving barrier, minimap  |
| `kaboul-savegame` | The same battle stage, resuming and saving progress                  |
| `kaboul-options`  | Options screen: music volume, full screen and windowed mode          |
| `kaboul-arena`    | Appearance and input selection, then the timed two-level brawler     |

## Controls

Title menu (`kaboul`)
- Click a button to choose it. **Play** opens the mode page; **New game**
  there fades to a five-second loading animation, after which the game
  program is started.
- **B** returns to the title page from the mode or loading page.
- **Esc**, the quit button or closing the window quits.

Lobby (`kaboul-lobby`)
- Pick solo or multi, then an avatar, then validate. The return button
  goes back to the first page. **Esc** quits.

Battle (`kaboul-battle`, `kaboul-savegame`)
- **Left** and **Right** move the player.
- **E** attacks the enemies you are touching; each has six hit points.
- Walking over an obstacle removes it. The barrier cannot be walked through.
- **S** saves progress to `saved_game.dat` in the asset directory
  (`kaboul-savegame` only). That file is loaded the next time the stage
  starts.
- **Esc** quits.

Arena (`kaboul-arena`)
- First choose an appearance and an input mode, then confirm; the choice is
  written to `menu/choices.txt` as `appearance=N` and `input=N` lines.
- **Left** and **Right** move, **Up** jumps, **K** attacks.
- Level 1 lasts 15 seconds, level 2 lasts 30.
- When level 2 ends, type your name (letters, digits, `_`, `-` and space,
  up to 15 characters), press **Enter** to record your score, and the best
  scores are then shown. **Enter** closes the board.

Options (`kaboul-options`)
- Click the arrows, or press **+** and **-**, to change the music volume
  (six levels, 0 to 5).
- The full-screen and windowed buttons switch the display mode.
- The screen keeps running until its window is closed.

## Scores

Scores are appended to `score.txt` in the asset directory, one `name score`
pair per line. The board lists the ten best of the first twenty entries.

## What the package does not do

- The title menu and the lobby hand over to other programs by running
  `./prog` inside a subdirectory of the asset directory: `kh` for the
  title menu's options button, `integration1` when the title menu starts
  the game, and `integration` when the lobby starts it. The package does
  not install or create those programs; place there whatever should run,
  for instance a script that calls `kaboul-options`, `kaboul-lobby` or
  `kaboul-battle`.
- The story button of the title menu and the English button on its mode
  page only print a message; there is no story screen and no language
  switch.
- The options screen's settings are not stored anywhere and do not carry
  over to the other screens.