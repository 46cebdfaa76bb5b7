# lucatools

Tools for working with assets of games built on the LucaSystem engine:

- **CZ images** (`CZ0`, `CZ1`, `CZ2`, `CZ3`): export to PNG, and import a PNG
  back into a CZ file using an existing CZ file as the template for its
  header and block size.
- **Bitmap fonts** (a CZ glyph sheet plus its matching `info` file, such as
  `明朝24` with `info24`): export the glyph sheet and its character list, and
  redraw, replace or append characters drawn from a TrueType font.

## Installation

```
pip install .
```

Pillow is the only runtime dependency.

## Command line

The `lucatools` command has two groups of subcommands, `image` and `font`.
Run with no arguments or `-h` to see the help.

Export a CZ image to PNG:

```
lucatools image export -i 10.cz0 -o 10.png
```

Import an edited PNG into a new CZ file, using the original file as a template
(`-s` is required for import):

```
lucatools image import -s 10.cz0 -i 10.png -o 10.new.cz0
```

For `CZ1` and `CZ2` the `-f`/`--fill` flag pads a smaller PNG to the size of
the source image. `CZ1` and `CZ2` imports take the PNG's alpha channel as the
new palette indices; `CZ3` imports need a PNG of exactly the source size.

Extract a font's glyph sheet and its character list:

```
lucatools font extract -s 明朝32 -S info32 -o 明朝32.png -O info32.txt
```

Edit a font using a TrueType file and a text file of characters:

```
lucatools font edit -s 明朝32 -S info32 -o 明朝32.new -O info32.new \
    -f MyFont.ttf -c chars.txt --append
```

Use `-i N` instead of `--append` to start placing characters at glyph cell
`N`, and `-r` to redraw all existing glyphs with the new font. Running with
`-r` and no character file redraws the existing character set only.

Global options, given before the subcommand: `--log`/`--no-log` (logging is
on by default), `--log_level` (6 or more logs debug messages) and `--log_dir`
(default `log`, where `lucatools.log` is written), plus `--version`.

## Library use

```python
from lucatools.czimage.loader import load_cz_image_file

cz = load_cz_image_file("10.cz0")
with open("10.png", "wb") as out:
    cz.export(out)

with open("10.png", "rb") as src:
    cz.import_png(src, False)
with open("10.new.cz0", "wb") as out:
    cz.write(out)
```

```python
from lucatools.font.luca_font import load_luca_font_file

font = load_luca_font_file("info32", "明朝32")
image = font.get_string_image("Hello")
```

Lower-level pieces:

- `lucatools.czimage.lzw`: the two LZW variants used by CZ files
  (`compress_lzw`, `decompress_lzw`, `compress_lzw2`, `decompress_lzw2`).
- `lucatools.czimage.bitio.BitIO`: a least-significant-bit-first bit stream.
- `lucatools.czimage.blocks`: block-wise `compress`, `decompress`,
  `compress2`, `decompress2`.
- `lucatools.czimage.header` and `lucatools.czimage.imagefix`: the common CZ
  header, the block table and the row-delta coding of `CZ3`.
- `lucatools.font.info`: the font `info` table (`load_font_info`,
  `create_font_info`, `FontInfo`).
- `lucatools.charset`: `convert`, `to_utf8` and `utf8_to` between text
  encodings.

Malformed data raises `CzFormatError`, `LzwError`, `FontError` or
`CharsetError`, all subclasses of `ValueError`.

## What it does not do

- It does not read or write `.PAK` archives, nor decompile or rebuild game
  scripts; fonts and images must be given as separate files.
- `font create` only reports that creating a new font is not supported, and
  `LucaFont.write` refuses fonts made with `create_luca_font`.
- `CZ4` images are not recognised; `CZ2` images decode only with 8-bit colour.

## Running the tests

```
pip install .[test]
pytest
```