"""Practice exams generated from the student's PDF library."""

import math
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from uuid import uuid4

from agrostudy.errors import ValidationError
from agrostudy.schemas.assistant import BankQuestion, ExamQuestion, ExamResult, PracticeExam
from agrostudy.schemas.pdfs import PdfDocumentRead

EXAM_DURATION_MINUTES = 45
NO_PDF_SELECTED = "Selecione pelo menos um PDF para gerar o simulado"

QUESTION_BANK: tuple[BankQuestion, ...] = (
    BankQuestion(
        id="1",
        question="Qual é o principal objetivo da agricultura sustentável?",
        options=[
            "Maximizar a produção a qualquer custo",
            "Equilibrar produtividade, sustentabilidade ambiental e viabilidade econômica",
            "Reduzir custos de produção",
            "Aumentar o uso de pesticidas",
        ],
        correct_answer=1,
        difficulty="Médio",
        topic="Sustentabilidade",
    ),
    BankQuestion(
        id="2",
        question="O que caracteriza um sistema de plantio direto?",
        options=[
            "Preparo intensivo do solo",
            "Ausência de cobertura vegetal",
            "Não revolvimento do solo e manutenção da cobertura",
            "Uso exclusivo de fertilizantes químicos",
        ],
        correct_answer=2,
        difficulty="Médio",
        topic="Manejo do Solo",
    ),
    BankQuestion(
        id="3",
        question="Qual a importância da rotação de culturas?",
        options=[
            "Apenas para diversificar a produção",
            "Melhorar a fertilidade do solo e quebrar ciclos de pragas",
            "Reduzir a necessidade de irrigação",
            "Aumentar o tamanho das plantas",
        ],
        correct_answer=1,
        difficulty="Fácil",
        topic="Rotação de Culturas",
    ),
    BankQuestion(
        id="4",
        question="Quais são os principais nutrientes que as plantas necessitam?",
        options=[
            "Apenas água e luz solar",
            "Nitrogênio, fósforo e potássio (NPK)",
            "Somente carbono e oxigênio",
            "Apenas minerais do solo",
        ],
        correct_answer=1,
        difficulty="Fácil",
        topic="Nutrição Vegetal",
    ),
    BankQuestion(
        id="5",
        question="O que é manejo integrado de pragas (MIP)?",
        options=[
            "Uso exclusivo de pesticidas químicos",
            "Estratégia que combina métodos biológicos, culturais e químicos",
            "Eliminação total de todos os insetos",
            "Uso apenas de métodos orgânicos",
        ],
        correct_answer=1,
        difficulty="Difícil",
        topic="Controle de Pragas",
    ),
)


def generate_exam(pdfs: Sequence[PdfDocumentRead], now: datetime | None = None) -> PracticeExam:
    """Build an exam for the selected PDFs. The subject is the first PDF's category."""
    if not pdfs:
        raise ValidationError(NO_PDF_SELECTED, field="pdf_ids")
    subject = pdfs[0].category or "Geral"
    questions = [ExamQuestion(**q.model_dump(exclude={"correct_answer"})) for q in QUESTION_BANK]
    return PracticeExam(
        id=uuid4().hex,
        title=f"Simulado - {subject}",
        subject=subject,
        questions=questions,
        duration_minutes=EXAM_DURATION_MINUTES,
        generated_at=now or datetime.now(timezone.utc),
        total_questions=len(questions),
    )


def score_exam(answers: Mapping[str, int], questions: Sequence[BankQuestion] = QUESTION_BANK) -> ExamResult:
    """Unanswered questions count as wrong."""
    total = len(questions)
    correct = sum(1 for q in questions if answers.get(q.id) == q.correct_answer)
    score = math.floor(correct / total * 100 + 0.5) if total else 0
    return ExamResult(score=score, correct=correct, total=total)
