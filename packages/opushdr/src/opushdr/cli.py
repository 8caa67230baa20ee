from __future__ import annotations
import argparse, json, logging, sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from .config import DecoderConfig
from .codec import DecodeFailure, decode_headers
from .bitstream import OpusHeaders


def setup_logging(log_file: Optional[Path], verbose: bool = True) -> None:
    log_fmt = "[%(asctime)s] %(levelname)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(level=level, format=log_fmt, datefmt=datefmt, handlers=handlers)


def parse_args(argv=None):
    p = argparse.ArgumentParser(prog="opushdr", description="Affiche les en-têtes OpusHead/OpusTags de fichiers .opus")
    p.add_argument("files", nargs="+", help="Fichiers Ogg Opus")
    p.add_argument("--json", action="store_true", help="Sortie JSON (un objet par fichier)")
    p.add_argument("--strict-comments", action="store_true", help="Rejeter les commentaires sans '='")
    p.add_argument("--log-file", default=None)
    p.add_argument("--verbose", action="store_true")
    return p.parse_args(argv)


def format_headers(h: OpusHeaders) -> str:
    ident, tags = h.identification, h.comments
    lines = [
        f"  version            : {ident.version}",
        f"  channels           : {ident.channel_count}",
        f"  pre-skip           : {ident.pre_skip}",
        f"  input sample rate  : {ident.input_sample_rate or 'unspecified'}",
        f"  output gain        : {ident.output_gain} ({ident.output_gain_db:+.2f} dB)",
        f"  mapping family     : {ident.channel_mapping_family}",
    ]
    table = ident.channel_mapping_table
    if table is not None:
        lines.append(f"  streams / coupled  : {table.stream_count} / {table.coupled_count}")
        lines.append(f"  channel mapping    : {list(table.channel_mapping)}")
    lines.append(f"  vendor             : {tags.vendor_string}")
    for tag, value in tags.user_comments:
        lines.append(f"    {tag}={value}")
    return "\n".join(lines)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(Path(args.log_file) if args.log_file else None, verbose=args.verbose)

    cfg = DecoderConfig.from_env()
    if args.strict_comments:
        cfg = replace(cfg, strict_comments=True)

    ok = 0
    for i, name in enumerate(args.files, 1):
        p = Path(name)
        logging.info("[%d/%d] read: %s", i, len(args.files), p)
        try:
            with p.open("rb") as f:
                res = decode_headers(f, cfg)
        except OSError as e:
            logging.error("Échec ouverture %s: %s", p, e)
            continue
        if isinstance(res, DecodeFailure):
            logging.error("Échec decode %s: [%s] %s", p, res.kind.value, res.message)
            continue
        if args.json:
            print(json.dumps({"file": str(p), **res.to_dict()}, ensure_ascii=False))
        else:
            print(f"{p}:")
            print(format_headers(res))
        ok += 1
    return 0 if ok == len(args.files) else 1


if __name__ == "__main__":
    sys.exit(main())
