"""Language front ends for pymoq."""
