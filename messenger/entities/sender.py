# messenger/entities/sender.py
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SenderDisplay:
    """Atributos de exibição do remetente de uma mensagem.

    Mensagem enviada em nome de empresa mostra nome/logo da empresa;
    caso contrário, nome/avatar da pessoa. O lado que não se aplica fica None.
    """

    company_name: Optional[str]
    company_logo: Optional[str]
    person_name: Optional[str]
    person_avatar: Optional[str]

    @classmethod
    def from_row(cls, msg, sender, company) -> "SenderDisplay":
        if msg.company_id:
            return cls(
                company_name=getattr(company, "name", None),
                company_logo=getattr(company, "logo_url", None),
                person_name=None,
                person_avatar=None,
            )
        return cls(
            company_name=None,
            company_logo=None,
            person_name=getattr(sender, "name", None),
            person_avatar=getattr(sender, "avatar_url", None),
        )

    @property
    def display_name(self) -> Optional[str]:
        return self.company_name or self.person_name
