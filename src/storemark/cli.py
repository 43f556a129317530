import argparse
import logging

from .config import load_run_config, resolve_run_settings
from .errors import MarkError
from .executor import run_mark


def main(argv=None):
    epilog = """
Быстрые примеры:

  # Записать по 100 файлов в 8 потоков (файлы /<поток>/<номер>)
  storemark --mode put --address file:///mnt/bench --threads 8 --count 100

  # Прочитать и проверить то, что записал прогон с тем же seed
  storemark --mode read --address file:///mnt/bench --threads 8 --count 100

  # Бесконечная запись с параметрами из конфига
  storemark --config storemark.yaml
"""
    parser = argparse.ArgumentParser(
        prog="storemark",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="Нагрузочный тест и проверка содержимого удалённого файлового хранилища",
        epilog=epilog,
    )
    parser.add_argument("--config", help="YAML-файл с параметрами запуска. Все параметры из конфига можно переопределить через CLI")
    parser.add_argument("--mode", choices=["put", "read"], default=None, help="Режим: put (запись файлов) или read (чтение и сверка содержимого), по умолчанию put")
    parser.add_argument("--address", default=None, help="Адрес хранилища (URL fsspec, например file:///mnt/bench, memory://bench, gs://bucket/prefix)")
    parser.add_argument("--count", type=int, default=None, help="Количество файлов на поток; 0 - без ограничения (по умолчанию: 0)")
    parser.add_argument("--threads", type=int, default=None, help="Количество потоков нагрузки (по умолчанию: 5)")
    parser.add_argument("--seed", type=int, default=None, help="Seed генератора; поток i использует seed + i (по умолчанию: 301)")
    parser.add_argument("--file-size", dest="file_size", default=None, help="Размер файла в KB или строкой вида 4MB (по умолчанию: 1024)")
    parser.add_argument("--log-level", dest="log_level", default="WARNING", help="Уровень логирования диагностики (DEBUG, INFO, WARNING)")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(), format="%(asctime)s - %(levelname)s - %(message)s"
    )

    config_model = None
    if args.config:
        try:
            config_model = load_run_config(args.config)
        except (OSError, ValueError) as exc:
            raise SystemExit(f"Не удалось прочитать конфиг: {exc}") from exc
    try:
        settings = resolve_run_settings(args, config_model)
    except ValueError as exc:
        raise SystemExit(f"run: invalid --file-size: {exc}") from exc
    try:
        run_mark(settings.to_namespace())
    except MarkError as exc:
        raise SystemExit(f"FATAL: {exc}") from exc
