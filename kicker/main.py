"""
Kicker Main Entry Point

Loads the config, builds one Strategy per criteria and runs the kick loop
against the Kubernetes cluster until interrupted.
"""

import argparse
import logging
import signal
import sys
from typing import List, Optional

from kicker.config import load_config
from kicker.engine import KickerEngine
from kicker.exceptions import FetchError, KickerError
from kicker.policies import register_builtin_policies
from kicker.registry import StrategyRegistry
from kicker.sources import KubernetesCandidateSource
from kicker.strategy import new_group


def configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    # The Kubernetes client's transport is chatty at DEBUG
    logging.getLogger('urllib3').setLevel(max(level, logging.INFO))


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Kicker: age-based pod eviction')
    parser.add_argument('--config', type=str, default=None,
                        help='Path to the kicker config file '
                             '(default: $KICKER_CONFIG or ./kicker.yaml)')
    parser.add_argument('--log-level', default='info', help='Logging level')
    parser.add_argument('--once', action='store_true',
                        help='Run a single cycle and exit')
    return parser


def install_signal_handlers(engine: KickerEngine) -> None:
    """Stop the engine on SIGINT/SIGTERM so the current cycle can finish."""

    def _handle(signum, frame):
        logger.info(f"🛑 Received {signal.Signals(signum).name}, shutting down...")
        engine.stop()

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    logger.info("🚀 Starting Kicker")

    try:
        config = load_config(args.config)
        registry = register_builtin_policies(StrategyRegistry())
        logger.info(f"   Strategies available: {registry.names()}")
        strategies = new_group(config.criteria, registry)
        source = KubernetesCandidateSource.from_kube_config(config.kube_config)
    except KickerError as e:
        logger.error(f"❌ Failed to start: {e}")
        return 1

    for criteria in config.criteria:
        logger.info(
            f"   Criteria '{criteria.name}': namespace={criteria.namespace}, "
            f"strategy={criteria.strategy}, max_age={criteria.max_age}s, "
            f"min_age={criteria.min_age}s, limit={criteria.limit}, "
            f"grace_period={criteria.grace_period}s, cool_down={criteria.cool_down}s"
        )

    engine = KickerEngine(source, strategies, config.check_interval)

    try:
        if args.once:
            engine.run_cycle()
        else:
            install_signal_handlers(engine)
            engine.run()
    except FetchError as e:
        logger.error(f"❌ {e}")
        return 1

    logger.info("✅ Kicker stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
