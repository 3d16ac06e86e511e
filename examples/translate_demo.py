"""Minimal demonstration of a streaming translation."""

import asyncio
import sys

from lingo_core import translate_text


def _stdout_writer():
    printed = 0

    def on_generating(text):
        nonlocal printed
        sys.stdout.write(text[printed:])
        sys.stdout.flush()
        printed = len(text)

    return on_generating


if __name__ == "__main__":
    text = " ".join(sys.argv[1:]) or "The quick brown fox jumps over the lazy dog."
    print("Text:", text)
    asyncio.run(
        translate_text(
            text,
            on_generating=_stdout_writer(),
            on_success=lambda result, messages: print(),
            on_error=lambda msg: print("Error:", msg),
        )
    )
