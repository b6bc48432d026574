"""Board application: bulk JSON import/export of lists and cards."""
