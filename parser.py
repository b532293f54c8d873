# parser.py
import logging
from enum import Enum
from typing import List, Union

from docx import Document

from chaoxing_template import parse_chaoxing
from compact_template import parse_compact
from generic_template import parse_generic
from models import Question

logger = logging.getLogger(__name__)


class ScriptTemplate(str, Enum):
    """可选的文本模板"""
    OTHER = "other"                    # 通用格式
    CHAOXING = "chaoxing"              # 学习通
    SINGLE_CHOICE1 = "singlechoice1"   # 紧凑单选


TEMPLATE_PARSERS = {
    ScriptTemplate.OTHER: parse_generic,
    ScriptTemplate.CHAOXING: parse_chaoxing,
    ScriptTemplate.SINGLE_CHOICE1: parse_compact,
}

TEMPLATE_EXAMPLES = {
    ScriptTemplate.CHAOXING: """1. (单选题)以下选项中，哪一个是JavaScript的基本数据类型?
A. Array
B. Object
C. Number
D. Function
正确答案:C

2. (多选题)以下哪些是JavaScript框架或库?
A. React
B. Vue
C. Python
D. Angular
正确答案:A,B,D

3. (判断题)HTML是一种编程语言。
正确答案:错误

4. (填空题)CSS选择器中，____ 用于选择类，而 ____ 用于选择ID。
正确答案:(1) .;(2) #""",

    ScriptTemplate.SINGLE_CHOICE1: """1. 关于上颌第一磨牙髓腔形态的描述不正确的是A.髓室颊舌中径大于近远中径且大于髓室高度B.髓室顶形凹，最凹处约接近牙冠中1／3
C.近颊髓角和近舌髓角均接近牙冠中1／3
D.远颊髓角和远舌髓角均接近牙冠顶1／3
E.近颊根管为双管型或单双管型者共占63%
参考答案：B

2. 汇合形成面后静脉的是A．面前静脉，颞浅静脉
B．颞浅静脉，颌内静脉
C．翼静脉丛，颌内静脉
D．面前静脉，耳后静脉
E．翼静脉丛，耳后静脉
参考答案：B""",

    ScriptTemplate.OTHER: """1. 以下哪个不是 JavaScript 基本数据类型?( )
A. String
B. Number
C. Array
D. Boolean
正确答案:C:Array;

2. 哪个 JSP 动作标记用于动态包含另一个 JSP 页面?( )
A. jsp:forward
B. jsp:useBean
C. jsp:setProperty
D. jsp:include
正确答案:D:jsp:include;""",
}


def to_template(template: Union[ScriptTemplate, str, None]) -> ScriptTemplate:
    """未知模板一律按通用格式处理"""
    try:
        return ScriptTemplate(template)
    except ValueError:
        logger.debug("未知模板 %r，按通用格式解析", template)
        return ScriptTemplate.OTHER


def parse_text(text: str, template: Union[ScriptTemplate, str, None] = ScriptTemplate.OTHER) -> List[Question]:
    """
    按模板把粘贴的文本解析成题目列表。
    单个题块识别失败只会被跳过；返回空列表表示一道都没识别出来。
    """
    return TEMPLATE_PARSERS[to_template(template)](text or "")


def read_docx_text(file_path: str) -> str:
    """读出 Word 文档全部段落，一段一行"""
    doc = Document(file_path)
    return "\n".join(para.text for para in doc.paragraphs)


def parse_docx(file_path: str, template: Union[ScriptTemplate, str, None] = ScriptTemplate.OTHER) -> List[Question]:
    return parse_text(read_docx_text(file_path), template)
