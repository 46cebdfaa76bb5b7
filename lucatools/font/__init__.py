"""LucaSystem bitmap fonts: glyph sheets and their info tables."""