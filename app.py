# formmail - Local Development Server
# Serves a static site and its contact form endpoint from one process.
# Settings come from a YAML file with the same keys as the environment variables.

import argparse
import os

from flask import send_from_directory

from formmail import create_app
from formmail.environ import yaml_loader


def _make_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description='Serve a static site with a working contact form')
    p.add_argument('--env', default='env.yaml', help='Path to YAML file with environment variables')
    p.add_argument('--assets', default='.', help='Path to folder with HTML assets you would like to serve')
    p.add_argument('--port', type=int, default=8000, help='Server port')
    return p


def main():
    args = _make_parser().parse_args()
    assets = os.path.abspath(args.assets)

    app = create_app(
        'development',
        env_loader=yaml_loader(args.env),
        static_folder=assets,
        static_url_path='',
    )

    @app.route('/')
    def index():
        return send_from_directory(assets, 'index.html')

    app.run(debug=True, host='0.0.0.0', port=args.port)


if __name__ == '__main__':
    main()
