import argparse
import logging
import statistics
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from node.storage_node import MemoryNode, RingRouter
from ring.config import DEFAULT_REPLICAS, RingConfig
from ring.errors import RingConfigError
from ring.hash_functions import HASH_FUNCTIONS
from ring.hash_ring import COLLISION_POLICIES, HashRing

logger = logging.getLogger(__name__)

DEFAULT_NODES = ["node1", "node2", "node3", "node4"]


def build_ring(config: RingConfig, node_names: Iterable[str]) -> Tuple[HashRing, List[MemoryNode]]:
    ring = config.build()
    nodes = [MemoryNode(name) for name in node_names]
    for node in nodes:
        ring.add(node)
    return ring, nodes


def distribute(ring: HashRing, keys: Iterable[str]) -> Dict[str, List[str]]:
    assignments: Dict[str, List[str]] = {node.name: [] for node in ring.list_nodes()}
    for key in keys:
        assignments[ring.resolve(key).name].append(key)
    return assignments


def owners(ring: HashRing, keys: Iterable[str]) -> Dict[str, str]:
    keys = list(keys)
    return {key: node.name for key, node in zip(keys, ring.resolve_all(keys))}


def load_variance(assignments: Dict[str, List[str]]) -> float:
    counts = [len(keys) for keys in assignments.values()]
    if not counts:
        return 0.0
    return statistics.pvariance(counts)


def moved_keys(before: Dict[str, str], after: Dict[str, str]) -> List[str]:
    return [key for key, owner in before.items() if after.get(key) != owner]


def print_report(assignments: Dict[str, List[str]], show_keys: bool = True) -> None:
    total = sum(len(keys) for keys in assignments.values())
    for name, keys in assignments.items():
        share = (len(keys) / total) * 100 if total else 0.0
        line = f"node({share:.1f}%): {name}"
        if show_keys:
            line += f", keys: {','.join(keys)}"
        print(line)
    print(f"variance: {load_variance(assignments):.2f}")


def run_distribute(config: RingConfig, node_names: Sequence[str], num_keys: int, prefix: str) -> None:
    ring, _ = build_ring(config, node_names)
    router = RingRouter(ring)
    for i in range(num_keys):
        router.put(f"{prefix}{i}", i)
    print(f"{config.hash_name} (replicas={config.number_of_replicas})")
    print_report(distribute(ring, router.keys()))


def run_compare(config: RingConfig, node_names: Sequence[str], num_keys: int, prefix: str) -> None:
    keys = [f"{prefix}{i}" for i in range(num_keys)]
    print("Hash,Variance")
    for hash_name in sorted(HASH_FUNCTIONS):
        algo_config = RingConfig(
            number_of_replicas=config.number_of_replicas,
            hash_name=hash_name,
            on_collision=config.on_collision,
        )
        ring, _ = build_ring(algo_config, node_names)
        print(f"{hash_name},{load_variance(distribute(ring, keys)):.2f}")


def run_rebalance(config: RingConfig, node_names: Sequence[str], num_keys: int, prefix: str,
                  remove: Sequence[str], add: Sequence[str]) -> None:
    ring, nodes = build_ring(config, node_names)
    keys = [f"{prefix}{i}" for i in range(num_keys)]
    before = owners(ring, keys)

    by_name = {node.name: node for node in nodes}
    for name in remove:
        if name not in by_name:
            logger.warning("Unknown node %s, skipping removal", name)
            continue
        ring.remove(by_name[name])
    for name in add:
        ring.add(MemoryNode(name))

    after = owners(ring, keys)
    moved = moved_keys(before, after)
    share = (len(moved) / num_keys) * 100 if num_keys else 0.0
    print(f"moved {len(moved)}/{num_keys} keys ({share:.1f}%)")
    print_report(distribute(ring, keys), show_keys=False)


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Consistent hash ring key distribution report")
    parser.add_argument("--replicas", type=int, default=DEFAULT_REPLICAS)
    parser.add_argument("--hash", dest="hash_name", default="md5", choices=sorted(HASH_FUNCTIONS))
    parser.add_argument("--on-collision", default="ignore", choices=COLLISION_POLICIES)
    parser.add_argument("--nodes", nargs="+", default=DEFAULT_NODES)
    parser.add_argument("--keys", type=int, default=100)
    parser.add_argument("--prefix", default="key")
    parser.add_argument("--verbose", action="store_true")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("distribute")
    sub.add_parser("compare")

    p_rebal = sub.add_parser("rebalance")
    p_rebal.add_argument("--remove", nargs="*", default=[])
    p_rebal.add_argument("--add", nargs="*", default=[])

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[ring] %(asctime)s %(levelname)s %(message)s",
    )
    try:
        config = RingConfig(number_of_replicas=args.replicas, hash_name=args.hash_name, on_collision=args.on_collision)
    except RingConfigError as exc:
        parser.error(str(exc))

    if args.cmd == "distribute":
        run_distribute(config, args.nodes, args.keys, args.prefix)
    elif args.cmd == "compare":
        run_compare(config, args.nodes, args.keys, args.prefix)
    elif args.cmd == "rebalance":
        run_rebalance(config, args.nodes, args.keys, args.prefix, args.remove, args.add)


if __name__ == "__main__":
    main()
