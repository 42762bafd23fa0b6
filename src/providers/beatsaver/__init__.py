from providers.beatsaver.client import BeatSaverCatalog, parse_beatmap

__all__ = ["BeatSaverCatalog", "parse_beatmap"]
