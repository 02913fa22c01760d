"""Lambda handler for the shop API using Mangum."""
from mangum import Mangum

from shop_api.main import create_app

app = create_app()

handler = Mangum(app, lifespan="off")

lambda_handler = handler
