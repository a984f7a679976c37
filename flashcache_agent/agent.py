#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Licensed to the Apache Software Foundation (ASF) under one
# or more contributor license agreements.  See the NOTICE file
# distributed with this work for additional information
# regarding copyright ownership.  The ASF licenses this file
# to you under the Apache License, Version 2.0 (the
# "License"); you may not use this file except in compliance
# with the License.  You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing,
# software distributed under the License is distributed on an
# "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY
# KIND, either express or implied.  See the License for the
# specific language governing permissions and limitations
# under the License.

"""
flashcache resource agent

Invoked by the cluster resource manager with a single action token:

    flashcache-agent <action>

Actions: start, stop, status|monitor, reload, validate-all, meta-data, usage|help

Parameters are read from the environment:

- OCF_RESKEY_name           (default: flashcache)
- OCF_RESKEY_device         (required, backing block device)
- OCF_RESKEY_cache_device   (required, cache block device)

The exit status follows the OCF resource agent API.
"""
from typing import Optional

import typer

from .cli import ActionDispatcher

cli = typer.Typer(add_completion=False)


@cli.command(context_settings={"ignore_unknown_options": True})
def run(action: Optional[str] = typer.Argument(None, help="Action requested by the cluster manager")):
    """Run one resource agent action and exit with its OCF status."""
    result = ActionDispatcher().dispatch(action)
    raise typer.Exit(code=int(result.status))


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
