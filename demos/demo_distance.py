import os
import math
import logging
import argparse
from datetime import datetime

from PySimpleCollisionLib import (
    DistanceOptions,
    RigidPlacement,
    collide,
    distance,
    load_obj,
    make_box,
    make_icosphere,
)
from PySimpleCollisionLib.io.perf import perf


def setup_query_logger(log_dir: str = "."):
    """File logger for query results, one file per run."""
    logger = logging.getLogger("PySimpleCollisionLib")
    logger.setLevel(logging.DEBUG)
    if logger.handlers:
        logger.handlers.clear()
    log_filename = os.path.join(log_dir, f"query_log_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log")
    file_handler = logging.FileHandler(log_filename, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)
    logger.propagate = False
    return logger, log_filename


def build_mesh(kind: str, obj_path: str = None):
    if obj_path:
        return load_obj(obj_path)
    if kind == "sphere":
        return make_icosphere(R=0.5, subdivisions=2)
    return make_box()


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--shape", choices=["box", "sphere"], default="box")
    parser.add_argument("--obj", type=str, default=None)
    parser.add_argument("--gap", type=float, default=3.0, help="x offset of the second mesh")
    parser.add_argument("--yaw_deg", type=float, default=0.0, help="rotation of the second mesh about z")
    parser.add_argument("--rel_error", type=float, default=0.0)
    parser.add_argument("--abs_error", type=float, default=0.0)
    parser.add_argument("--perf_csv", type=str, default=None)
    parser.add_argument("--log_dir", type=str, default=None)
    parser.add_argument("--viz", action="store_true")
    args = parser.parse_args()

    if args.log_dir:
        logger, log_path = setup_query_logger(args.log_dir)
        logger.info("log file: %s", log_path)

    meshA = build_mesh(args.shape, args.obj)
    meshB = build_mesh(args.shape, args.obj)
    pA = RigidPlacement.identity()
    pB = RigidPlacement.from_euler(0.0, 0.0, math.radians(args.yaw_deg), translation=(args.gap, 0.0, 0.0))

    hit = collide(meshA, pA, meshB, pB)
    res = distance(meshA, pA, meshB, pB, DistanceOptions(args.rel_error, args.abs_error, True))
    print(f"collide={hit} distance={res.distance:.9g} success={res.success}")
    print(f"nearest A={res.nearest_point_a} nearest B={res.nearest_point_b} stats={res.stats}")

    if args.perf_csv:
        perf.set_meta(triangles_a=len(meshA), triangles_b=len(meshB))
        perf.write_csv(args.perf_csv)
    if args.viz:
        from PySimpleCollisionLib.visualization.pyvista_backend import visualize_distance
        visualize_distance(meshA, pA, meshB, pB, res)


if __name__ == "__main__":
    main()
