from marshmallow import EXCLUDE, Schema, fields, validate

from chirpy.models.chirp import MAX_CHIRP_LENGTH


class ChirpCreateSchema(Schema):
    body = fields.String(
        required=True,
        validate=validate.Length(min=1, max=MAX_CHIRP_LENGTH, error="Chirp must be 1-140 characters long."),
    )


class ChirpOutSchema(Schema):
    id = fields.String()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
    body = fields.String()
    user_id = fields.String()


class ChirpListArgsSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    author_id = fields.UUID(load_default=None)
    sort = fields.String(load_default="asc", validate=validate.OneOf(["asc", "desc"]))
