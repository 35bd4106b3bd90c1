#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Development Server
==================

Run the site with ``python3 -m agora``. Use a proper WSGI server
pointed at :func:`agora.app.create_app` in production.
"""


import os

from agora.app import create_app
from agora.config import listen_port
from agora.log import log_to_console, make_logger
from agora.mongo import ping


log = make_logger('agora')


def main():
    log_to_console()

    app = create_app()
    ping(app)

    port = listen_port()
    mode = os.environ.get('AGORA_ENV', 'development')

    log.info('%s listening on port %i in %s mode',
             app.config['SITE_NAME'], port, mode)

    app.run(host=os.environ.get('HOST', '0.0.0.0'), port=port,
            debug=app.debug, use_reloader=False)


if __name__ == '__main__':
    main()


# vim:set sw=4 ts=4 et:
