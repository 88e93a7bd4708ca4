"""ExpectQA command-line interface."""
