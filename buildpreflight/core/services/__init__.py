"""Services — command resolution, toolchain lookup and the preflight rules."""
