class EmittingStream:
    """File-like object that forwards complete lines written to it to a log callback."""

    def __init__(self, callback, prefix=""):
        self.callback = callback
        self.prefix = prefix
        self._buffer = ""

    def write(self, text):
        self._buffer += text
        while "\n" in self._buffer:
            line, self._buffer = self._buffer.split("\n", 1)
            if line.strip():
                self.callback(f"{self.prefix}{line.rstrip()}")
        return len(text)

    def flush(self):
        if self._buffer.strip():
            self.callback(f"{self.prefix}{self._buffer.rstrip()}")
        self._buffer = ""
