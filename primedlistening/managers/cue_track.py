import pysubs2

STRUCTURED_SUFFIXES = (".ass", ".ssa")


class CueTrack:
    """
    Subtitle cues for the loaded video.
    Each cue is a tuple: (start_ms, end_ms, event)
    """
    def __init__(self, log_callback=print):
        self.log = log_callback
        self.cues = []
        self.path = None
        self.structured = False

    def load(self, path, encoding="utf-8"):
        subs = pysubs2.load(str(path), encoding=encoding)
        self.load_file(subs, structured=str(path).lower().endswith(STRUCTURED_SUFFIXES))
        self.path = path
        self.log(f"[CueTrack] Loaded {len(self.cues)} cues from {path}")

    def load_file(self, subs, structured=True):
        """Use an already parsed pysubs2.SSAFile."""
        self.clear()
        for ev in subs:
            if ev.is_comment or ev.end <= ev.start:
                continue
            self.cues.append((ev.start, ev.end, ev))
        self.cues.sort(key=lambda cue: cue[0])
        self.structured = structured

    def clear(self):
        self.cues = []
        self.path = None
        self.structured = False

    def active_at(self, position_ms):
        """Events showing at position_ms, in file order."""
        return [ev for start, end, ev in self.cues if start <= position_ms < end]

    @staticmethod
    def plain_text(events):
        return "\n".join(ev.plaintext for ev in events if ev.plaintext.strip())

    def ass_full(self, events):
        """One structured record per event, or None for formats without styles."""
        if not self.structured:
            return None
        return "\n".join(self.format_record(ev) for ev in events)

    @classmethod
    def format_record(cls, ev):
        fields = [
            str(ev.layer),
            cls._format_timestamp(ev.start),
            cls._format_timestamp(ev.end),
            ev.style,
            ev.name,
            str(ev.marginl),
            str(ev.marginr),
            str(ev.marginv),
            ev.effect,
            ev.text,
        ]
        return ",".join(fields)

    @staticmethod
    def _format_timestamp(ms):
        seconds = ms / 1000
        h = int(seconds // 3600)
        m = int((seconds % 3600) // 60)
        s = int(seconds % 60)
        cs = int(ms % 1000) // 10
        return f"{h:d}:{m:02d}:{s:02d}.{cs:02d}"

    def __len__(self):
        return len(self.cues)
