"""
envconfig Tag Extractor

Extracts configuration keys from struct fields tagged for the envconfig
convention:

    type Config struct {
        // Database URL for connection
        DatabaseURL string `envconfig:"DATABASE_URL" required:"true" default:"localhost:5432"`
    }

Per field, in declaration order:
    1. Fields without a tag, or with an empty tag, are skipped
    2. The tag's delimiters are removed and it is parsed as a struct tag
    3. Fields without the key attribute are skipped, whatever else they carry
    4. The type name must be a plain identifier (see UnsupportedTypePolicy)
    5. required is true only for the literal value "true"
    6. default is taken verbatim ("" when absent)
    7. The field's own doc comment becomes the key's one-line comment

The first key found for a struct creates its ConfigType and attaches the
comment groups of the struct's declaration.
"""

from typing import Optional

from envdoc.errors import UnsupportedFieldTypeError
from envdoc.extractors.base import BaseExtractor, UnsupportedTypePolicy
from envdoc.extractors.collector import Declaration
from envdoc.golang.ast import Field
from envdoc.golang.comments import CommentIndex
from envdoc.golang.literals import unquote
from envdoc.golang.tags import StructTag
from envdoc.schema import ConfigKey, ConfigType


class EnvconfigExtractor(BaseExtractor):
    """
    Builds ConfigTypes from envconfig-style struct tags.

    Usage:
        extractor = EnvconfigExtractor()
        configs = extractor.extract(collect_decls(package.files), package.comments)
        for warning in extractor.get_warnings():
            print(warning)
    """

    name = "envconfig"

    def extract(
        self,
        decls: dict[str, Declaration],
        comments: CommentIndex,
    ) -> dict[str, ConfigType]:
        """
        Extract the configuration model of one package.

        Args:
            decls: Struct declarations by type name
            comments: Comment index of the same package

        Returns:
            Mapping from type name to ConfigType

        Raises:
            UnsupportedFieldTypeError: If a tagged field has a non-identifier
                type and the policy is UnsupportedTypePolicy.ERROR
        """
        configs: dict[str, ConfigType] = {}
        for type_name, declaration in decls.items():
            for field in declaration.fields:
                key = self._extract_key(type_name, field)
                if key is None:
                    continue
                if type_name not in configs:
                    configs[type_name] = ConfigType(
                        comments=comments.comments_by_pos(declaration.decl.pos),
                    )
                configs[type_name].keys.append(key)
        return configs

    def _parse_tag(self, field: Field) -> Optional[StructTag]:
        if field.tag is None or not field.tag.value:
            return None
        try:
            return StructTag(unquote(field.tag.value))
        except ValueError:
            self.add_warning(f"{self._location(field)}: malformed tag {field.tag.value}")
            return None

    def _extract_key(self, type_name: str, field: Field) -> Optional[ConfigKey]:
        """Build the ConfigKey for one field, or None if it is not a config field."""
        tag = self._parse_tag(field)
        if tag is None:
            return None

        key_name = tag.lookup(self.options.key_tag)
        if key_name is None:
            return None
        if not key_name:
            self.add_warning(
                f"{self._location(field)}: empty {self.options.key_tag} key on "
                f"{type_name}.{self._field_name(field)}, skipped"
            )
            return None

        type_str = self._type_name(type_name, key_name, field)
        if type_str is None:
            return None

        comment = field.doc.text().replace("\n", "") if field.doc is not None else ""

        return ConfigKey(
            name=key_name,
            type=type_str,
            required=tag.lookup(self.options.required_tag) == "true",
            default=tag.get(self.options.default_tag),
            comment=comment,
        )

    def _type_name(self, type_name: str, key_name: str, field: Field) -> Optional[str]:
        """Apply the unsupported-type policy to a field's declared type."""
        ident = field.type.ident_name
        if ident is not None:
            return ident

        policy = self.options.unsupported_types
        if policy == UnsupportedTypePolicy.STRINGIFY:
            return field.type.text
        if policy == UnsupportedTypePolicy.ERROR:
            raise UnsupportedFieldTypeError(
                type_name, key_name, field.type.text, self._location(field)
            )
        self.add_warning(
            f"{self._location(field)}: {key_name} on {type_name} has unsupported "
            f"type {field.type.text}, skipped"
        )
        return None

    @staticmethod
    def _field_name(field: Field) -> str:
        return ", ".join(field.names) if field.names else field.type.text

    @staticmethod
    def _location(field: Field) -> str:
        if field.pos is None:
            return "<unknown>"
        return f"{field.pos.filename}:{field.pos.line}"
