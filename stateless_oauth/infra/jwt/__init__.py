from stateless_oauth.infra.jwt.flask_jwt_token_generator import FlaskJWTTokenGenerator

__all__ = ["FlaskJWTTokenGenerator"]
