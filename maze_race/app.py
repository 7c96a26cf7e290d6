# maze_race/app.py
import argparse
from typing import Optional

from flask import Flask, jsonify, request

from maze_race.config import DIFFICULTY_SETTINGS, MOVE_CADENCE
from maze_race.errors import InvalidDifficulty, InvalidDirection, RaceNotFound, UnsupportedMode
from maze_race.log import configure_logging, get_logger
from maze_race.systems.registry import RaceRegistry

logger = get_logger(__name__)


def create_app(registry: Optional[RaceRegistry] = None) -> Flask:
    app = Flask(__name__)
    app.config["RACES"] = registry if registry is not None else RaceRegistry()

    def races() -> RaceRegistry:
        return app.config["RACES"]

    def payload() -> dict:
        return request.get_json(silent=True) or {}

    @app.errorhandler(InvalidDifficulty)
    @app.errorhandler(UnsupportedMode)
    @app.errorhandler(InvalidDirection)
    def bad_request(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(RaceNotFound)
    def not_found(e):
        return jsonify({"error": e.args[0] if e.args else "race not found"}), 404

    @app.route('/api/difficulties')
    def difficulties():
        """Presets the race can be started with."""
        data = {
            name: dict(settings, cadence=MOVE_CADENCE[name])
            for name, settings in DIFFICULTY_SETTINGS.items()
        }
        return jsonify(data)

    @app.route('/api/races', methods=['POST'])
    def start_race():
        body = payload()
        handle = races().start_race(body.get("difficulty"), body.get("mode", "single"))
        snap = races().snapshot(handle)
        return jsonify({"handle": handle, "race": snap.to_dict()}), 201

    @app.route('/api/races/<handle>')
    def race_state(handle):
        include_maze = request.args.get("maze", "1") != "0"
        return jsonify(races().snapshot(handle).to_dict(include_maze=include_maze))

    @app.route('/api/races/<handle>/move', methods=['POST'])
    def move(handle):
        body = payload()
        moved = races().submit_direction(handle, body.get("direction", ""))
        snap = races().snapshot(handle)
        return jsonify({"moved": moved, "race": snap.to_dict(include_maze=False)})

    @app.route('/api/races/<handle>/reset', methods=['POST'])
    def reset(handle):
        races().reset_race(handle)
        return jsonify(races().snapshot(handle).to_dict())

    @app.route('/api/races/<handle>', methods=['DELETE'])
    def leave(handle):
        races().leave_race(handle)
        return "", 204

    return app


def main(argv=None):
    parser = argparse.ArgumentParser(description='Maze race JSON API')
    parser.add_argument('--host', default='127.0.0.1')
    parser.add_argument('--port', type=int, default=5000)
    parser.add_argument('--seed', type=int, default=None, help='Seed for reproducible mazes')
    parser.add_argument('--log-level', default=None)
    parser.add_argument('--debug', action='store_true')
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    app = create_app(RaceRegistry(seed=args.seed))
    logger.info("Serving maze race API on %s:%d", args.host, args.port)
    app.run(host=args.host, port=args.port, debug=args.debug, threaded=True)


if __name__ == '__main__':
    main()
