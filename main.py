# main.py
from pathlib import Path
import argparse
import json
from typing import List, Optional

from somkmeans.data.dataset import DatasetFile
from somkmeans.data.validation import validate_dataset
from somkmeans.driver.config import DEFAULT_EPOCHS, KMeansConfig, Method
from somkmeans.driver.runner import KMeansRunner
from somkmeans.errors import SomKMeansError
from somkmeans.metrics.quality import som_quality
from somkmeans.metrics.topology import LATTICES, MapGrid, SOMMap
from somkmeans.utils.logging import setup_logger

ROOT = Path(__file__).resolve().parent
RESULTS_JSON = ROOT / "kmeans_results.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="k-means (seq / batch) на файле данных")
    parser.add_argument("--data", type=Path, required=True, help="Путь к файлу датасета.")
    parser.add_argument(
        "--method",
        type=str,
        default=Method.BATCH.value,
        help="Метод обучения: seq или batch.",
    )
    parser.add_argument(
        "--clusters",
        type=int,
        default=None,
        help="Число кластеров (центроиды выбираются из случайных точек данных).",
    )
    parser.add_argument(
        "--use-file-centroids",
        action="store_true",
        help="Взять начальные центроиды из файла датасета.",
    )
    parser.add_argument("--epochs", type=int, default=DEFAULT_EPOCHS, help="Число эпох.")
    parser.add_argument("--seed", type=int, default=None, help="Seed для инициализации.")
    parser.add_argument(
        "--processes",
        type=int,
        default=1,
        help="Число процессов для назначения в пакетном режиме.",
    )
    parser.add_argument(
        "--msize",
        type=int,
        nargs=2,
        default=None,
        metavar=("ROWS", "COLS"),
        help="Разложить центроиды на решётку и посчитать качество карты SOM.",
    )
    parser.add_argument("--lattice", choices=LATTICES, default="rect")
    parser.add_argument("--output", type=Path, default=RESULTS_JSON)
    parser.add_argument("--verbose", action="store_true", help="Сообщать о сходимости.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = setup_logger()

    try:
        config = KMeansConfig(
            method=args.method,
            n_clusters=args.clusters,
            epochs=args.epochs,
            verbose=args.verbose,
            seed=args.seed,
            n_processes=args.processes,
        )

        dataset = DatasetFile(args.data)
        validate_dataset(dataset)

        initial_centroids = None
        if args.use_file_centroids:
            if dataset.initial_centroids is None:
                raise ValueError(f"{args.data} has no stored centroids")
            initial_centroids = dataset.initial_centroids

        result = KMeansRunner(config, logger=logger).run(dataset.data, initial_centroids)

        report = {"data": str(args.data), "method": config.method.value, **result.as_dict()}

        if args.msize is not None:
            som_map = SOMMap(result.centroids, MapGrid(tuple(args.msize), args.lattice))
            qe, te = som_quality(som_map, dataset.data)
            report["som_quality"] = {"quantization_error": qe, "topographic_error": te}
            logger.info(f"SOM quality: qe={qe:.6g}, te={te:.4f}")
    except (SomKMeansError, ValueError, OSError) as e:
        logger.error(f"{e}")
        return 2

    with open(args.output, "w", encoding="utf-8") as f:
        json.dump(report, f, ensure_ascii=False, indent=2)

    logger.info(
        f"Finished '{config.method.value}': status={result.status.value}, "
        f"error={result.error:.6g}"
    )
    logger.info(f"Results saved to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
