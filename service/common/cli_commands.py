######################################################################
# Copyright 2016, 2024 John J. Rofrano. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
######################################################################

"""
Flask CLI Command Extensions
"""
from flask import current_app as app  # Import Flask application
from service.cart_cache import cart_cache
from service.models import db


######################################################################
# Command to force tables to be rebuilt
# Usage:
#   flask db-create
######################################################################
@app.cli.command("db-create")
def db_create():
    """
    Recreates a local database. You probably should not use this on
    production. ;-)
    """
    db.drop_all()
    db.create_all()
    db.session.commit()
    cart_cache.clear()


######################################################################
# Command to drop every cached response
# Usage:
#   flask cache-clear
######################################################################
@app.cli.command("cache-clear")
def cache_clear():
    """Drops every cached cart and cart list response."""
    size = cart_cache.cache.stats()["size"]
    cart_cache.clear()
    app.logger.info("Cleared %d cached responses", size)
