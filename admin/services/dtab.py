import logging

from admin.dtab import Dtab, read_dtab
from admin.schemas import DtabResponse

logger = logging.getLogger(__name__)


class DtabService:
    _base: Dtab = Dtab()

    @classmethod
    def load_base(cls, text: str) -> Dtab:
        cls._base = read_dtab(text)
        logger.info('Base dtab loaded', extra={'dentries': len(cls._base)})
        return cls._base

    @classmethod
    def base(cls) -> Dtab:
        return cls._base

    @staticmethod
    def get_dtab(dtab: Dtab) -> DtabResponse:
        logger.debug('Dumping dtab', extra={'dentries': len(dtab)})
        return DtabResponse(dtab=[dentry.show for dentry in dtab])
